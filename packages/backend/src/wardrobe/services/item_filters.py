"""Item query builder — turns raw query parameters into a safe filter.

Learn: The owner condition is fixed when the filter is built and cannot
be replaced by anything in the query string. Only whitelisted keys are
looked at, so ``?owner=<someone-else>`` or ``?image_asset_id=...`` do
nothing. Values must be plain non-empty strings: repeated keys
(``?name=a&name=b``) arrive as lists and are dropped, never coerced.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

import structlog
from sqlalchemy import ColumnElement

from wardrobe.db.models import Category, ClothingItem

logger = structlog.get_logger()

FILTERABLE_FIELDS = ("name", "category", "color", "brand")
TEXT_SEARCH_FIELDS = frozenset({"name", "brand"})

CONTAINS = "contains"
EXACT = "exact"


@dataclass(frozen=True)
class Condition:
    field: str
    op: str  # CONTAINS (case-insensitive substring) or EXACT
    value: str


@dataclass(frozen=True)
class ItemFilter:
    """Owner-scoped filter. ``owner_id`` is always part of the WHERE clause."""

    owner_id: uuid.UUID
    conditions: tuple[Condition, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict[str, Any]:
        """Plain-dict view, used for logging."""
        out: dict[str, Any] = {"owner": str(self.owner_id)}
        for c in self.conditions:
            out[c.field] = {c.op: c.value}
        return out

    def where_clauses(self) -> Iterator[ColumnElement[bool]]:
        yield ClothingItem.owner_id == self.owner_id
        for c in self.conditions:
            column = getattr(ClothingItem, c.field)
            if c.op == CONTAINS:
                yield column.ilike(f"%{_escape_like(c.value)}%", escape="\\")
            else:
                yield column == c.value


def _escape_like(value: str) -> str:
    """Search text is literal: LIKE wildcards in user input match themselves."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_valid_param(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def _build_condition(key: str, value: str) -> Condition | None:
    if key in TEXT_SEARCH_FIELDS:
        return Condition(key, CONTAINS, value)
    if key != "category":
        return Condition(key, EXACT, value)

    category = Category.parse(value)
    if category is None:
        logger.info("clothing.filter_ignored", field="category", value=value)
        return None
    return Condition(key, EXACT, category.value)


def build_item_filter(query: Mapping[str, Any], owner_id: uuid.UUID) -> ItemFilter:
    """Build the listing filter for ``owner_id`` from raw query parameters.

    Unknown keys are ignored, non-string or empty values are ignored, and
    an unrecognised category is dropped (logged, not an error) so the
    caller still gets their unfiltered wardrobe.
    """
    conditions = []
    for key in FILTERABLE_FIELDS:
        value = query.get(key)
        if not _is_valid_param(value):
            continue
        condition = _build_condition(key, value)
        if condition is not None:
            conditions.append(condition)
    return ItemFilter(owner_id=owner_id, conditions=tuple(conditions))


def query_params_to_mapping(items: list[tuple[str, str]]) -> dict[str, Any]:
    """Collapse multi-valued query items: single values stay strings,
    repeated keys become lists (which the builder then ignores)."""
    grouped: dict[str, list[str]] = {}
    for key, value in items:
        grouped.setdefault(key, []).append(value)
    return {k: v[0] if len(v) == 1 else v for k, v in grouped.items()}
