"""Artist and album catalog with search, name history and role-based policies."""

__version__ = "0.1.0"
