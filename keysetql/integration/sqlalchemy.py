""" Keyset pagination for SqlAlchemy Core statements

Same semantics as Paginator.push_where*(), push_order_by(), push_limit(), but applied to an `sa.select()`.
"""

from __future__ import annotations

import operator
from collections import abc
from typing import Any, Optional, Union

import sqlalchemy as sa
import sqlalchemy.orm

from keysetql import exc
from keysetql.paginator import Paginator


# A Table, an alias, a subquery, or a mapped ORM class
SATarget = Union[sa.sql.expression.FromClause, type, sa.orm.util.AliasedClass]

# A column: a Table column, or a mapped column attribute
SAColumn = Union[sa.sql.ColumnElement, sa.orm.QueryableAttribute]


def apply_to_statement(paginator: Paginator, stmt: sa.sql.Select, target: SATarget, cursor: Optional[abc.Sequence[Any]]) -> sa.sql.Select:
    """ Paginate a Select statement: add WHERE, ORDER BY, LIMIT

    Args:
        paginator: The pagination settings
        stmt: The statement to paginate
        target: The table (or model) to resolve `paginator.columns` against
        cursor: Values of the boundary row, one per column. `None` for the first page.
    """
    return (
        stmt
        .where(filter_expression(paginator, target, cursor))
        .order_by(*order_by_columns(paginator, target))
        .limit(paginator.size)
    )


def filter_expression(paginator: Paginator, target: SATarget, cursor: Optional[abc.Sequence[Any]]) -> sa.sql.ColumnElement:
    """ Get the pagination condition: `(col_1, ..., col_N) op (val_1, ..., val_N)`, or `true` when there's no cursor

    Raises:
        exc.CursorError: the number of cursor values differs from the number of columns
        exc.InvalidColumnError: a column is not found on `target`
    """
    if cursor is None:
        return sa.true()

    # Check the cursor: unlike push_whereN(), there's nothing that checks the arity in advance
    cursor = tuple(cursor)
    if len(cursor) != len(paginator.columns):
        raise exc.CursorError(paginator.columns, cursor)

    # Filter
    op = {'>': operator.gt, '<': operator.lt}[paginator.compare_operator]
    return op(
        sa.tuple_(*resolve_columns(paginator, target)),
        cursor,
    )


def order_by_columns(paginator: Paginator, target: SATarget) -> abc.Iterator[sa.sql.ColumnElement]:
    """ Generate the list of columns, sorted asc()/desc(), to be used in ORDER BY """
    for column in resolve_columns(paginator, target):
        if paginator.sort_order == 'desc':
            yield column.desc()
        else:
            yield column.asc()


def resolve_columns(paginator: Paginator, target: SATarget) -> list[SAColumn]:
    return [
        resolve_column_by_name(name, target, where='pagination')
        for name in paginator.columns
    ]


def resolve_column_by_name(column_name: str, target: SATarget, *, where: str) -> SAColumn:
    """ Find a column by name on a Table (or alias), or on a mapped class

    Raises:
        exc.InvalidColumnError: no such column
    """
    # Table, alias, subquery
    if isinstance(target, sa.sql.expression.FromClause):
        try:
            return target.c[column_name]
        except KeyError as e:
            raise exc.InvalidColumnError(target_name(target), column_name, where=where) from e

    # Mapped class or aliased class.
    # getattr() on an AliasedClass adapts the expression to use the aliased name
    try:
        attribute = getattr(target, column_name)
    except AttributeError as e:
        raise exc.InvalidColumnError(target_name(target), column_name, where=where) from e

    # Check that it actually is a column: not a relationship, not a @property
    if not is_column_property(attribute):
        raise exc.InvalidColumnError(target_name(target), column_name, where=where)

    # Done
    return attribute


def is_column_property(attribute: Any) -> bool:
    """ Is it a mapped column attribute? """
    return (
        isinstance(attribute, sa.orm.QueryableAttribute) and
        isinstance(attribute.property, sa.orm.ColumnProperty)
    )


def target_name(target: SATarget) -> str:
    """ Get a readable name for the table or model, for error messages """
    if isinstance(target, sa.sql.expression.FromClause):
        return getattr(target, 'name', None) or str(target)
    return getattr(target, '__name__', None) or repr(target)
