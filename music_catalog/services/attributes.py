"""Input validation for artist and album mutations."""
import re
from datetime import date
from typing import Any, Dict, Mapping, Optional, Type
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError

COVER_IMAGE_URL = re.compile(r"^(https://|/images/).+\.(png|jpe?g)$", re.IGNORECASE)


class _Attributes(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class ArtistCreate(_Attributes):
    """Attributes accepted when creating an artist."""
    name: str = Field(..., min_length=1, max_length=255)
    biography: Optional[str] = None


class ArtistUpdate(_Attributes):
    """Attributes accepted when updating an artist. Only set keys are applied."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    biography: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("name cannot be null")
        return value


def _check_year(value: Optional[int]) -> Optional[int]:
    if value is not None and not 1950 < value <= date.today().year + 1:
        raise ValueError(f"year_released must be after 1950 and at most {date.today().year + 1}")
    return value


def _check_cover(value: Optional[str]) -> Optional[str]:
    if value is not None and not COVER_IMAGE_URL.match(value):
        raise ValueError("cover_image_url must be an https:// or /images/ URL to a png or jpg")
    return value


class AlbumCreate(_Attributes):
    """Attributes accepted when creating an album."""
    artist_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    year_released: Optional[int] = None
    cover_image_url: Optional[str] = Field(None, max_length=1024)

    @field_validator("year_released")
    @classmethod
    def year_in_range(cls, value: Optional[int]) -> Optional[int]:
        return _check_year(value)

    @field_validator("cover_image_url")
    @classmethod
    def cover_is_image(cls, value: Optional[str]) -> Optional[str]:
        return _check_cover(value)


class AlbumUpdate(_Attributes):
    """Attributes accepted when updating an album."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    year_released: Optional[int] = None
    cover_image_url: Optional[str] = Field(None, max_length=1024)

    @field_validator("year_released")
    @classmethod
    def year_in_range(cls, value: Optional[int]) -> Optional[int]:
        return _check_year(value)

    @field_validator("cover_image_url")
    @classmethod
    def cover_is_image(cls, value: Optional[str]) -> Optional[str]:
        return _check_cover(value)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("name cannot be null")
        return value


def validate_attributes(model: Type[BaseModel], attributes: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Validate raw attributes and return only the keys the caller set."""
    try:
        parsed = model.model_validate(dict(attributes or {}))
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in e.errors()
        ]
        raise ValidationError(
            message="Invalid attributes",
            details={"errors": errors},
        ) from e
    return parsed.model_dump(exclude_unset=True)
