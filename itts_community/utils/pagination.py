"""
List-endpoint plumbing: page/page_size parsing, whitelisted sorting,
case-insensitive search and typed query-string filters.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import or_

from itts_community.errors import BadRequest
from itts_community.utils.timeutil import to_naive_utc

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 200


@dataclass
class ListParams:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    sort: str = ""
    search: str = ""
    filters: Dict[str, Any] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class Page:
    items: List[Any]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return math.ceil(self.total / self.page_size)


def _parse_positive(args, name, default):
    raw = args.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise BadRequest(f"{name} must be an integer") from None
    return value if value > 0 else default


def parse_list_params(args) -> ListParams:
    page_size = min(_parse_positive(args, "page_size", DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)
    return ListParams(
        page=_parse_positive(args, "page", DEFAULT_PAGE),
        page_size=page_size,
        sort=(args.get("sort") or "").strip(),
        search=(args.get("search") or "").strip(),
    )


def arg_str(args, name) -> Optional[str]:
    value = args.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def arg_bool(args, name) -> Optional[bool]:
    raw = arg_str(args, name)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise BadRequest(f"{name} must be a boolean")


def arg_int(args, name) -> Optional[int]:
    raw = arg_str(args, name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise BadRequest(f"{name} must be an integer") from None


def arg_datetime(args, name) -> Optional[datetime]:
    raw = arg_str(args, name)
    if raw is None:
        return None
    try:
        return to_naive_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))
    except ValueError:
        raise BadRequest(f"{name} must be an ISO 8601 datetime") from None


def apply_filters(query, model, filters):
    """Equality filters; ``None`` values are skipped."""
    for name, value in filters.items():
        if value is not None:
            query = query.filter(getattr(model, name) == value)
    return query


def apply_search(query, search, columns):
    if not search:
        return query
    pattern = f"%{search.lower()}%"
    return query.filter(or_(*[col.ilike(pattern) for col in columns]))


def apply_sort(query, sort, allowed, default):
    """
    Apply ``field:asc|desc`` tokens (comma separated). Fields outside
    ``allowed`` and malformed tokens are ignored; ``default`` is used when
    nothing valid remains.
    """
    clauses = []
    for token in sort.split(","):
        token = token.strip()
        if not token:
            continue
        name, _, direction = token.partition(":")
        column = allowed.get(name.strip())
        direction = (direction or "asc").strip().lower()
        if column is None or direction not in ("asc", "desc"):
            continue
        clauses.append(column.desc() if direction == "desc" else column.asc())

    if not clauses:
        clauses = list(default)
    return query.order_by(*clauses)


def paginate(query, params: ListParams) -> Page:
    total = query.order_by(None).count()
    items = query.offset(params.offset).limit(params.page_size).all()
    return Page(items=items, total=total, page=params.page, page_size=params.page_size)


def list_query(query, model, params: ListParams, *, search_columns=(), sort_fields=None, default_sort=()):
    """Filter, search, sort and paginate ``query`` in one go."""
    query = apply_filters(query, model, params.filters)
    query = apply_search(query, params.search, search_columns)
    query = apply_sort(query, params.sort, sort_fields or {}, default_sort)
    return paginate(query, params)
