"""Parameterized query builder.

Filters are optional and sparse: each present filter appends one clause
fragment and exactly one bound value, and the ``$n`` placeholder index moves
in lockstep with the parameter list. Fragments are constant templates that
refer to their value through ``{p}``; values never enter the SQL text.
Sorting goes through a fixed allow-list, and pagination always binds
``LIMIT`` and ``OFFSET`` as the last two parameters.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from enum import Enum
from numbers import Real
from typing import Any

from loguru import logger

from app.errors import ValidationError
from settings import DEFAULT_LIMIT, MAX_LIMIT

PLACEHOLDER = "{p}"
LIKE_ESCAPE = "\\"

_DIRECTIONS = {"ASC", "DESC"}


class Comparison(str, Enum):
    """How a filter value constrains its column(s)."""

    RANGE_MIN = "range_min"
    RANGE_MAX = "range_max"
    SUBSTRING = "substring"
    PREFIX = "prefix"
    MEMBERSHIP = "membership"
    DATE_FROM = "date_from"
    DATE_TO = "date_to"


@dataclass(frozen=True)
class Filter:
    """One requested constraint. Absent filters contribute nothing."""

    present: bool
    value: Any
    kind: Comparison


FilterSpec = Mapping[str, Filter]


@dataclass(frozen=True)
class FilterColumn:
    """Allow-listed filter: a name mapped to fixed column(s) and a comparison."""

    name: str
    columns: tuple[str, ...]
    kind: Comparison

    def __post_init__(self):
        if not self.columns:
            raise ValueError(f"Filter {self.name} needs at least one column")
        if len(self.columns) > 1 and self.kind not in (Comparison.SUBSTRING, Comparison.PREFIX):
            raise ValueError(f"Filter {self.name}: only text filters may span several columns")


@dataclass(frozen=True)
class PreparedPredicate:
    """Conditional clauses with their bound values, and the last used index."""

    clauses: list[tuple[str, Any]]
    param_index: int


@dataclass(frozen=True)
class PreparedQuery:
    """Final SQL text and its positional parameters."""

    sql: str
    params: list = field(default_factory=list)


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user text matches literally."""
    return text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", LIKE_ESCAPE + "%").replace("_", LIKE_ESCAPE + "_")


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) > 0
    return True


def build_filter_spec(values: Mapping[str, Any], definitions: Sequence[FilterColumn]) -> dict[str, Filter]:
    """FilterSpec from a partially populated input mapping."""
    return {
        d.name: Filter(present=_is_present(values.get(d.name)), value=values.get(d.name), kind=d.kind)
        for d in definitions
    }


def _as_number(name: str, value: Any) -> Real:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"Filter {name} must be a number")
    return value


def _as_epoch_ms(name: str, value: Any) -> int:
    """Dates as epoch milliseconds (UTC), matching ``last_updated``."""
    if isinstance(value, bool):
        raise ValidationError(f"Filter {name} must be a date")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValidationError(f"Filter {name} must be an ISO date") from e
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if not isinstance(value, datetime):
        raise ValidationError(f"Filter {name} must be a date")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def _render(definition: FilterColumn, value: Any) -> tuple[str, Any]:
    """Constant fragment and normalized bound value for one filter."""
    column = definition.columns[0]
    kind = definition.kind

    if kind in (Comparison.SUBSTRING, Comparison.PREFIX):
        if not isinstance(value, str):
            raise ValidationError(f"Filter {definition.name} must be text")
        pattern = escape_like(value.strip())
        bound = f"%{pattern}%" if kind is Comparison.SUBSTRING else f"{pattern}%"
        parts = [f"{c} ILIKE {PLACEHOLDER} ESCAPE '{LIKE_ESCAPE}'" for c in definition.columns]
        fragment = parts[0] if len(parts) == 1 else "(" + " OR ".join(parts) + ")"
        return fragment, bound
    if kind is Comparison.RANGE_MIN:
        return f"{column} >= {PLACEHOLDER}", _as_number(definition.name, value)
    if kind is Comparison.RANGE_MAX:
        return f"{column} <= {PLACEHOLDER}", _as_number(definition.name, value)
    if kind is Comparison.MEMBERSHIP:
        if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
            raise ValidationError(f"Filter {definition.name} must be a list")
        return f"list_contains({PLACEHOLDER}, {column})", sorted(str(v) for v in value)
    if kind is Comparison.DATE_FROM:
        return f"{column} >= {PLACEHOLDER}", _as_epoch_ms(definition.name, value)
    if kind is Comparison.DATE_TO:
        return f"{column} <= {PLACEHOLDER}", _as_epoch_ms(definition.name, value)
    raise ValueError(f"Unsupported comparison: {kind}")


def _non_negative_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a non-negative integer")
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    if isinstance(value, int) and value >= 0:
        return value
    raise ValidationError(f"{name} must be a non-negative integer")


@dataclass(frozen=True)
class Page:
    """Validated LIMIT/OFFSET pair."""

    limit: int = DEFAULT_LIMIT
    offset: int = 0

    @classmethod
    def of(cls, limit: Any = DEFAULT_LIMIT, offset: Any = 0, max_limit: int = MAX_LIMIT) -> "Page":
        """Validate both values; limit is clamped to [1, max_limit]."""
        limit = _non_negative_int("limit", limit)
        offset = _non_negative_int("offset", offset)
        return cls(limit=min(max(limit, 1), max_limit), offset=offset)


@dataclass(frozen=True)
class SortOptions:
    """Allow-list of symbolic sort names to fixed (column, direction) pairs."""

    options: Mapping[str, tuple[tuple[str, str], ...]]
    default: str

    def __post_init__(self):
        if self.default not in self.options:
            raise ValueError(f"Default sort {self.default!r} is not an option")
        for name, pairs in self.options.items():
            if not pairs or any(d not in _DIRECTIONS for _, d in pairs):
                raise ValueError(f"Sort option {name!r} has an invalid direction")

    def resolve(self, name: str | None) -> tuple[tuple[str, str], ...]:
        """Pairs for name; unknown names fall back to the default."""
        if name not in self.options:
            if name is not None:
                logger.debug("Unknown sort {!r}, using {!r}", name, self.default)
            name = self.default
        return self.options[name]


class QueryBuilder:
    """Accumulates (fragment, value) pairs and renders the final query."""

    def __init__(self, base: str, conditions: Sequence[str] = ()):
        self._base = base.strip()
        self._conditions = list(conditions)
        self._clauses: list[tuple[str, Any]] = []
        self._params: list = []
        self._index = 0

    @property
    def predicate(self) -> PreparedPredicate:
        return PreparedPredicate(clauses=list(self._clauses), param_index=self._index)

    def _bind(self, value: Any) -> str:
        self._index += 1
        self._params.append(value)
        return f"${self._index}"

    def add_filter(self, present: bool, fragment: str, value: Any) -> "QueryBuilder":
        """Append fragment with value bound to its {p} placeholder(s), if present."""
        if not present:
            return self
        if PLACEHOLDER not in fragment:
            raise ValueError("Filter fragment must reference its value through {p}")
        placeholder = self._bind(value)
        self._clauses.append((fragment.replace(PLACEHOLDER, placeholder), value))
        return self

    def apply(self, spec: FilterSpec, definitions: Sequence[FilterColumn]) -> "QueryBuilder":
        """Add every present filter of spec, in definition order."""
        for definition in definitions:
            requested = spec.get(definition.name)
            if requested is None or not requested.present:
                continue
            if requested.kind is not definition.kind:
                raise ValueError(f"Filter {definition.name}: expected {definition.kind}, got {requested.kind}")
            fragment, value = _render(definition, requested.value)
            self.add_filter(True, fragment, value)
        return self

    def build(
        self,
        page: Page,
        order_by: Sequence[tuple[str, str]] = (),
        group_by: str | None = None,
    ) -> PreparedQuery:
        """Render SQL; LIMIT and OFFSET are bound last."""
        sql = [self._base]

        where = self._conditions + [fragment for fragment, _ in self._clauses]
        if where:
            sql.append("WHERE " + " AND ".join(where))
        if group_by:
            sql.append("GROUP BY " + group_by)
        if order_by:
            sql.append("ORDER BY " + ", ".join(f"{column} {direction}" for column, direction in order_by))

        params = list(self._params)
        limit = f"${len(params) + 1}"
        offset = f"${len(params) + 2}"
        sql.append(f"LIMIT {limit} OFFSET {offset}")
        params.extend([page.limit, page.offset])

        return PreparedQuery(sql="\n".join(sql), params=params)
