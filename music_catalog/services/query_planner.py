"""Search planning for artists: filter, multi-key sort and offset pagination."""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..core.settings import app_settings
from ..models import Artist
from .aggregates import ArtistAggregates, aggregate_expression

logger = get_logger(__name__)

ASCENDING = "asc"
DESCENDING = "desc"

SORTABLE_FIELDS = (
    "name",
    "inserted_at",
    "updated_at",
    "album_count",
    "latest_album_year_released",
)

_SORT_TOKEN = re.compile(r"^(\+\+|--|\+|-)?([A-Za-z_][A-Za-z0-9_]*)$")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class SortKey:
    """One parsed sort directive."""
    field: str
    direction: str = ASCENDING
    nulls_last: bool = False

    @property
    def token(self) -> str:
        marker = "-" if self.direction == DESCENDING else "+"
        return f"{marker * 2 if self.nulls_last else marker}{self.field}"

    def expression(self):
        if self.field in ("name", "inserted_at", "updated_at"):
            column = getattr(Artist, self.field)
        else:
            column = aggregate_expression(self.field)

        ordered = column.asc() if self.direction == ASCENDING else column.desc()
        # Absent values count as the greatest value unless pinned last
        if self.nulls_last or self.direction == ASCENDING:
            return ordered.nulls_last()
        return ordered.nulls_first()


@dataclass(frozen=True)
class PageRequest:
    """Offset pagination parameters."""
    limit: int = field(default_factory=lambda: app_settings.default_page_limit)
    offset: int = 0
    count: bool = False

    def validate(self, max_limit: Optional[int] = None) -> "PageRequest":
        max_limit = max_limit or app_settings.max_page_limit
        if not 1 <= self.limit <= max_limit:
            raise ValidationError(
                message=f"Page limit must be between 1 and {max_limit}",
                details={"limit": self.limit},
            )
        if self.offset < 0:
            raise ValidationError(
                message="Page offset must not be negative",
                details={"offset": self.offset},
            )
        return self


@dataclass
class Page:
    """A slice of search results and what is needed to fetch the next one."""
    results: List[Artist]
    limit: int
    offset: int
    more: bool
    count: Optional[int] = None
    aggregates: Dict[UUID, ArtistAggregates] = field(default_factory=dict)

    @property
    def next_offset(self) -> int:
        return self.offset + len(self.results)

    def next_page(self) -> PageRequest:
        return PageRequest(limit=self.limit, offset=self.next_offset, count=self.count is not None)


def _normalize_field(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def parse_sort(directives: Union[None, str, Sequence[str]]) -> List[SortKey]:
    """
    Parse sort directives into sort keys.

    Accepts a list of tokens or a single comma separated string such as
    ``"+name,--latest_album_year_released"``. A leading ``+`` sorts ascending
    and ``-`` descending; a doubled marker additionally puts absent values
    last. A bare field name sorts ascending.
    """
    if directives is None:
        return []
    if isinstance(directives, str):
        directives = directives.split(",")

    keys: List[SortKey] = []
    seen = set()
    for raw in directives:
        token = raw.strip()
        if not token:
            continue

        match = _SORT_TOKEN.match(token)
        if not match:
            raise ValidationError(
                message=f"Invalid sort directive: {token!r}",
                details={"directive": token},
            )

        marker, name = match.groups()
        name = _normalize_field(name)
        if name not in SORTABLE_FIELDS:
            raise ValidationError(
                message=f"Cannot sort by {name!r}",
                details={"field": name, "allowed": list(SORTABLE_FIELDS)},
            )
        # Earlier directives win for a repeated field
        if name in seen:
            continue
        seen.add(name)

        marker = marker or "+"
        keys.append(
            SortKey(
                field=name,
                direction=DESCENDING if marker.startswith("-") else ASCENDING,
                nulls_last=len(marker) == 2,
            )
        )
    return keys


def _contains_pattern(query_text: str) -> str:
    escaped = query_text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


@dataclass
class SearchPlan:
    """An executable artist search."""
    query_text: str
    sort: List[SortKey]
    page: PageRequest

    @classmethod
    def build(
        cls,
        query_text: Optional[str],
        sort: Union[None, str, Sequence[str]],
        page: Optional[PageRequest] = None,
        max_limit: Optional[int] = None,
    ) -> "SearchPlan":
        page = (page or PageRequest()).validate(max_limit)
        keys = parse_sort(sort) or [SortKey("name")]
        return cls(query_text=(query_text or "").strip(), sort=keys, page=page)

    def _filtered(self, query):
        if self.query_text:
            query = query.where(Artist.name.ilike(_contains_pattern(self.query_text), escape="\\"))
        return query

    def statement(self):
        """SELECT for one page, fetching a single extra row to detect more results."""
        query = self._filtered(select(Artist))
        order = [key.expression() for key in self.sort]
        order.append(Artist.id.asc())
        return query.order_by(*order).offset(self.page.offset).limit(self.page.limit + 1)

    def count_statement(self):
        return self._filtered(select(func.count(Artist.id)))

    async def execute(self, db: AsyncSession) -> Page:
        result = await db.execute(self.statement())
        rows = list(result.scalars().all())

        total = None
        if self.page.count:
            total = (await db.execute(self.count_statement())).scalar_one()

        more = len(rows) > self.page.limit
        logger.debug("search_plan_executed", returned=min(len(rows), self.page.limit), more=more, **self.describe())
        return Page(
            results=rows[: self.page.limit],
            limit=self.page.limit,
            offset=self.page.offset,
            more=more,
            count=total,
        )

    def describe(self) -> Dict[str, object]:
        return {
            "query": self.query_text,
            "sort": [key.token for key in self.sort],
            "limit": self.page.limit,
            "offset": self.page.offset,
        }

