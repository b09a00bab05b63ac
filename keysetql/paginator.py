""" Paginator: keyset pagination clauses for a QueryBuilder """

from __future__ import annotations

from collections import abc
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TypeVar, Union

from .query_builder import QueryBuilder


T1 = TypeVar('T1')
T2 = TypeVar('T2')
T3 = TypeVar('T3')
T4 = TypeVar('T4')
T5 = TypeVar('T5')


class Direction(Enum):
    """ Pagination direction: where do the next rows lie, relative to the cursor? """
    # Towards smaller cursor values: 7 6 5 4 3 => ORDER BY desc, WHERE cols < cursor
    BACKWARD = 'backward'

    # Towards bigger cursor values:  3 4 5 6 7 => ORDER BY asc, WHERE cols > cursor
    FORWARD = 'forward'

    @classmethod
    def from_smaller(cls, smaller: bool) -> Direction:
        """ Get the direction from a flag: select rows where the cursor becomes smaller? """
        return cls.BACKWARD if smaller else cls.FORWARD

    @property
    def compare_operator(self) -> str:
        return '<' if self == Direction.BACKWARD else '>'

    @property
    def sort_order(self) -> str:
        return 'desc' if self == Direction.BACKWARD else 'asc'


@dataclass(frozen=True, init=False)
class Paginator:
    """ Keyset pagination: push WHERE, ORDER BY, LIMIT clauses into a QueryBuilder

    Example:
        paginator = Paginator(Direction.BACKWARD, 100, ['row_id'])

        builder = QueryBuilder('SELECT row_id, user_name FROM users WHERE true AND')
        paginator.push_where1(builder, 11)  # -> ((row_id) < ($1))
        paginator.push_order_by(builder)  # -> ORDER BY row_id desc
        paginator.push_limit(builder)  # -> LIMIT $2

    The paginator is immutable: reuse it with as many builders as you like.

    Note that the combination of `columns` should uniquely identify a row,
    and that cursor values have to come in the same order as `columns`.
    Neither is checked: a violation gives you duplicate or missing rows across pages.
    """
    # Which way the pages go
    direction: Direction

    # Page size: the number of rows to LIMIT the query to
    size: int

    # Sort rows using these columns (up to 5).
    # Order matters: this is both the order of the compared tuple and the ORDER BY order
    columns: tuple[str, ...]

    __slots__ = 'direction', 'size', 'columns'

    def __init__(self, direction: Union[bool, Direction], size: int, columns: abc.Iterable[str]):
        # A `bool` is accepted too: `True` for "smaller" (BACKWARD), `False` for "bigger" (FORWARD)
        if isinstance(direction, bool):
            direction = Direction.from_smaller(direction)

        # The dataclass is frozen
        object.__setattr__(self, 'direction', direction)
        object.__setattr__(self, 'size', size)
        object.__setattr__(self, 'columns', tuple(columns))

    @classmethod
    def new(cls, smaller: Union[bool, Direction], size: int, columns: abc.Iterable[str]) -> Paginator:
        """ Create a Paginator

        Args:
            smaller: The direction of the pagination.
                `True`: select rows towards the direction in which the cursor becomes smaller. Rows are sorted `desc`.
                `False`: select rows towards the direction in which the cursor becomes bigger. Rows are sorted `asc`.
                For example, if the sorting columns are `(time_of_insertion, table_pkey)`,
                and you want to scroll to the past, use `smaller=True`.
            size: Size of the page
            columns: Sort rows using these columns (up to 5)
        """
        return cls(smaller, size, columns)

    @property
    def compare_operator(self) -> str:
        return self.direction.compare_operator

    @property
    def sort_order(self) -> str:
        return self.direction.sort_order

    # ### WHERE
    # push_whereN() pushes and binds `((col_1, ..., col_N) op ($_, ..., $_))`, where `op` depends on the direction.
    # With no cursor (the first page), it pushes `true`: a condition that selects everything.
    # Pick the method that matches the number of columns.

    def push_where1(self, builder: QueryBuilder, cursor: Optional[T1]) -> None:
        """ Push the pagination condition for a single-column cursor: `((col) op ($_))` """
        if cursor is None:
            self._push_where(builder, None)
        else:
            self._push_where(builder, (cursor,))

    def push_where2(self, builder: QueryBuilder, cursor: Optional[tuple[T1, T2]]) -> None:
        if cursor is None:
            self._push_where(builder, None)
        else:
            t1, t2 = cursor
            self._push_where(builder, (t1, t2))

    def push_where3(self, builder: QueryBuilder, cursor: Optional[tuple[T1, T2, T3]]) -> None:
        if cursor is None:
            self._push_where(builder, None)
        else:
            t1, t2, t3 = cursor
            self._push_where(builder, (t1, t2, t3))

    def push_where4(self, builder: QueryBuilder, cursor: Optional[tuple[T1, T2, T3, T4]]) -> None:
        if cursor is None:
            self._push_where(builder, None)
        else:
            t1, t2, t3, t4 = cursor
            self._push_where(builder, (t1, t2, t3, t4))

    def push_where5(self, builder: QueryBuilder, cursor: Optional[tuple[T1, T2, T3, T4, T5]]) -> None:
        if cursor is None:
            self._push_where(builder, None)
        else:
            t1, t2, t3, t4, t5 = cursor
            self._push_where(builder, (t1, t2, t3, t4, t5))

    def _push_where(self, builder: QueryBuilder, values: Optional[tuple]) -> None:
        # First page: no condition
        if values is None:
            builder.push(' true')
            return

        # (col1, col2, ...)
        builder.push(' ((')
        sep = builder.separated(', ')
        for col in self.columns:
            sep.push(col)

        # operator: < or >
        builder.push(f') {self.compare_operator} (')

        # ($1, $2, ...)
        sep = builder.separated(', ')
        for value in values:
            sep.push_bind(value)
        builder.push('))')

    # ### ORDER BY, LIMIT

    def push_order_by(self, builder: QueryBuilder) -> None:
        """ Push the ORDER BY clause: `ORDER BY col_1 asc/desc, col_2 asc/desc, ...` """
        builder.push(' ORDER BY ')

        sep = builder.separated(', ')
        for col in self.columns:
            sep.push(col)
            sep.push_unseparated(f' {self.sort_order}')

    def push_limit(self, builder: QueryBuilder) -> None:
        """ Push the LIMIT clause: `LIMIT $_`, with the page size bound """
        builder.push(' LIMIT ')
        builder.push_bind(int(self.size))
