"""Pagination and sorting primitives for the repository layer.

``PageRequest`` describes which window of rows to read and in what order,
``Page`` carries one window plus the totals from a COUNT query, and
``Slice`` carries one window plus a has-next flag computed by reading a
single extra row, so no COUNT query is issued.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from sqlalchemy import Select
from sqlalchemy import inspect as sa_inspect

from app.core.exceptions import InvalidSortPropertyError

T = TypeVar("T")
R = TypeVar("R")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# largest OFFSET + LIMIT a 64-bit SQL integer can carry
_MAX_ROW = 2**63 - 1


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class Direction(Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def from_string(cls, value: str) -> Direction:
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Invalid sort direction '{value}'; expected 'asc' or 'desc'.") from None


@dataclass(frozen=True)
class Order:
    """A single ``property direction`` pair of an ORDER BY clause."""

    property: str
    direction: Direction = Direction.ASC

    @classmethod
    def asc(cls, prop: str) -> Order:
        return cls(prop, Direction.ASC)

    @classmethod
    def desc(cls, prop: str) -> Order:
        return cls(prop, Direction.DESC)

    def column_name(self) -> str:
        """Translate ``createdAt`` / ``user.id`` style names into column names.

        Returns:
            The snake_case attribute name, e.g. ``created_at`` or ``user_id``.
        """
        return _snake_case(self.property.replace(".", "_"))

    def _directed(self, attr: Any) -> Any:
        return attr.desc() if self.direction is Direction.DESC else attr.asc()

    def resolve(self, model_cls: type) -> tuple[Any, Any]:
        """Build the ORDER BY expression for this order against ``model_cls``.

        ``user.name`` style paths sort by a column of a many-to-one target;
        ``user.id`` still maps straight to the ``user_id`` foreign key.

        Returns:
            ``(relationship, clause)``: the relationship attribute the
            statement must join for this order, or None, and the ORDER BY clause.

        Raises:
            InvalidSortPropertyError: If the property is not a mapped column
                of the model or of a to-one related model.
        """
        mapper = sa_inspect(model_cls)
        name = self.column_name()
        if name in mapper.column_attrs:
            return None, self._directed(getattr(model_cls, name))

        rel_name, _, attr_name = self.property.partition(".")
        rel_name, attr_name = _snake_case(rel_name), _snake_case(attr_name)
        if attr_name and rel_name in mapper.relationships:
            rel = mapper.relationships[rel_name]
            if not rel.uselist and attr_name in rel.mapper.column_attrs:
                return getattr(model_cls, rel_name), self._directed(getattr(rel.mapper.class_, attr_name))

        raise InvalidSortPropertyError(self.property, model_cls.__name__)


@dataclass(frozen=True)
class Sort:
    """An ordered collection of ``Order`` items."""

    orders: tuple[Order, ...] = ()

    @classmethod
    def by(cls, *items: str | Order) -> Sort:
        """Create a sort from property names (ascending) or ``Order`` items."""
        return cls(tuple(item if isinstance(item, Order) else Order.asc(item) for item in items))

    @classmethod
    def unsorted(cls) -> Sort:
        return cls()

    @classmethod
    def parse(cls, params: Iterable[str] | None) -> Sort:
        """Parse HTTP ``sort`` parameters of the form ``property[,asc|desc]``.

        ``["createdAt,desc", "title"]`` becomes ``createdAt DESC, title ASC``.
        A single parameter may list several properties that share the
        trailing direction, e.g. ``"userId,createdAt,desc"``.
        """
        orders: list[Order] = []
        for param in params or ():
            parts = [p.strip() for p in param.split(",") if p.strip()]
            if not parts:
                continue
            if len(parts) > 1 and parts[-1].lower() in ("asc", "desc"):
                direction = Direction.from_string(parts[-1])
                parts = parts[:-1]
            else:
                direction = Direction.ASC
            orders.extend(Order(prop, direction) for prop in parts)
        return cls(tuple(orders))

    def ascending(self) -> Sort:
        return Sort(tuple(Order(o.property, Direction.ASC) for o in self.orders))

    def descending(self) -> Sort:
        return Sort(tuple(Order(o.property, Direction.DESC) for o in self.orders))

    def and_(self, other: Sort) -> Sort:
        return Sort(self.orders + other.orders)

    @property
    def is_sorted(self) -> bool:
        return bool(self.orders)

    def apply(self, stmt: Select, model_cls: type) -> Select:
        """Append this sort to a SELECT as ORDER BY clauses.

        Orders on a related column add one join per relationship.
        """
        if not self.orders:
            return stmt
        joined = set()
        clauses = []
        for order in self.orders:
            rel, clause = order.resolve(model_cls)
            if rel is not None and rel.key not in joined:
                stmt = stmt.join(rel)
                joined.add(rel.key)
            clauses.append(clause)
        return stmt.order_by(*clauses)


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index, page size and sort."""

    page: int = 0
    size: int = 10
    sort: Sort = field(default_factory=Sort.unsorted)

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("Page index must not be less than zero.")
        if self.size < 1:
            raise ValueError("Page size must not be less than one.")
        if self.offset + self.size + 1 > _MAX_ROW:
            raise ValueError("Page index and size exceed the addressable row range.")

    @classmethod
    def of(cls, page: int, size: int, sort: Sort | None = None) -> PageRequest:
        return cls(page, size, sort or Sort.unsorted())

    @property
    def offset(self) -> int:
        return self.page * self.size

    def apply(self, stmt: Select, model_cls: type, extra_rows: int = 0) -> Select:
        """Apply ORDER BY, OFFSET and LIMIT to ``stmt``.

        Args:
            stmt: The statement to window.
            model_cls: Model the sort properties are resolved against.
            extra_rows: Rows to read past the page size (Slice uses 1).

        Returns:
            The windowed statement.
        """
        stmt = self.sort.apply(stmt, model_cls)
        return stmt.offset(self.offset).limit(self.size + extra_rows)


@dataclass
class Slice(Generic[T]):
    """One window of results that only knows whether a next window exists."""

    content: list[T]
    pageable: PageRequest
    has_next: bool

    @property
    def number(self) -> int:
        return self.pageable.page

    @property
    def size(self) -> int:
        return self.pageable.size

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def has_previous(self) -> bool:
        return self.pageable.page > 0

    @property
    def is_first(self) -> bool:
        return not self.has_previous

    @property
    def is_last(self) -> bool:
        return not self.has_next

    @property
    def is_empty(self) -> bool:
        return not self.content

    @classmethod
    def from_overfetch(cls, rows: Sequence[T], pageable: PageRequest) -> Slice[T]:
        """Build a slice from ``size + 1`` rows read by the repository."""
        rows = list(rows)
        return cls(content=rows[: pageable.size], pageable=pageable, has_next=len(rows) > pageable.size)

    def map(self, fn: Callable[[T], R]) -> Slice[R]:
        return Slice([fn(item) for item in self.content], self.pageable, self.has_next)


@dataclass
class Page(Generic[T]):
    """One window of results together with the total row count."""

    content: list[T]
    pageable: PageRequest
    total_elements: int

    @property
    def number(self) -> int:
        return self.pageable.page

    @property
    def size(self) -> int:
        return self.pageable.size

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size)

    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    @property
    def is_first(self) -> bool:
        return not self.has_previous

    @property
    def is_last(self) -> bool:
        return not self.has_next

    @property
    def is_empty(self) -> bool:
        return not self.content

    def map(self, fn: Callable[[T], R]) -> Page[R]:
        return Page([fn(item) for item in self.content], self.pageable, self.total_elements)
