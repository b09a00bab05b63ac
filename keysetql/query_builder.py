""" QueryBuilder: raw SQL text with bound parameters

The builder accumulates SQL text and an ordered list of arguments.
Values are never interpolated into the text: every value becomes a placeholder + an argument.
Column names and other SQL fragments are pushed as raw text: they're trusted, so never push user input with push()!
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, NamedTuple, Optional, Union

import sqlalchemy as sa

from keysetql import exc


logger = logging.getLogger(__name__)


class PlaceholderStyle(Enum):
    """ How bound parameters are rendered into SQL text """
    # $1, $2, ... : PostgreSQL native; asyncpg
    DOLLAR = 'dollar'

    # %(p1)s, %(p2)s, ... : psycopg2
    PYFORMAT = 'pyformat'

    # :p1, :p2, ... : sqlite3.
    # Literal text is not escaped: for SqlAlchemy text(), use QueryBuilder.as_text()
    NAMED = 'named'

    def placeholder(self, n: int) -> str:
        """ Render the placeholder for the n-th parameter (1-based) """
        if self == PlaceholderStyle.DOLLAR:
            return f'${n}'
        elif self == PlaceholderStyle.PYFORMAT:
            return f'%(p{n})s'
        else:
            return f':p{n}'

    def escape(self, sql: str) -> str:
        """ Escape literal text so that the driver won't see it as a placeholder """
        if self == PlaceholderStyle.PYFORMAT:
            return sql.replace('%', '%%')
        else:
            return sql


class BuiltQuery(NamedTuple):
    """ The result of QueryBuilder.build(): SQL text and parameters, ready for the driver """
    sql: str
    params: Union[list, dict[str, Any]]


class QueryBuilder:
    """ Build a raw SQL query with bound parameters

    Example:
        builder = QueryBuilder('SELECT * FROM users WHERE true AND')
        builder.push(' age >= ').push_bind(18)
        sql, params = builder.build()
        # -> 'SELECT * FROM users WHERE true AND age >= $1', [18]
    """
    # The SQL text the builder was started with. reset() returns to it.
    init: str

    # Placeholder style used by `sql`, `params()` and `build()`
    style: PlaceholderStyle

    def __init__(self, init: str = '', *, style: PlaceholderStyle = PlaceholderStyle.DOLLAR):
        self.init = init
        self.style = style

        # SQL text chunks and placeholders, in order
        self._parts: list[Union[str, _Bind]] = [init] if init else []

        # Bound values; the n-th placeholder refers to _arguments[n-1]
        self._arguments: list[Any] = []

        # Set by build(); cleared by reset()
        self._built = False

    __slots__ = 'init', 'style', '_parts', '_arguments', '_built'

    def push(self, sql: str) -> QueryBuilder:
        """ Append raw SQL text. It is not escaped in any way: only push trusted SQL! """
        self._check_not_built()
        self._parts.append(sql)
        return self

    def push_bind(self, value: Any) -> QueryBuilder:
        """ Bind a value as a parameter and append its placeholder """
        self._check_not_built()
        self._arguments.append(value)
        self._parts.append(_Bind(len(self._arguments)))
        return self

    def separated(self, separator: str) -> Separated:
        """ Start a sequence of pushes separated with `separator`

        Example:
            sep = builder.separated(', ')
            for col in ('a', 'b', 'c'):
                sep.push(col)
            # -> 'a, b, c'
        """
        return Separated(self, separator)

    @property
    def sql(self) -> str:
        """ SQL text, rendered in this builder's style """
        return self.render(self.style)

    @property
    def arguments(self) -> tuple:
        """ Bound values, in placeholder order """
        return tuple(self._arguments)

    def render(self, style: Optional[PlaceholderStyle] = None) -> str:
        """ Render SQL text with placeholders in the given style """
        style = style or self.style
        return ''.join(
            style.escape(part) if isinstance(part, str) else style.placeholder(part.n)
            for part in self._parts
        )

    def params(self, style: Optional[PlaceholderStyle] = None) -> Union[list, dict[str, Any]]:
        """ Get parameters in the shape the driver expects: a list for positional placeholders, a dict for named ones """
        style = style or self.style
        if style == PlaceholderStyle.DOLLAR:
            return list(self._arguments)
        else:
            return {f'p{n}': value for n, value in enumerate(self._arguments, 1)}

    def build(self) -> BuiltQuery:
        """ Finish building: get the SQL and its parameters

        The builder can't be pushed into anymore. Use reset() to start over.
        """
        self._built = True
        query = BuiltQuery(self.sql, self.params())
        logger.debug('Built query with %d parameters: %s', len(self._arguments), query.sql)
        return query

    def reset(self) -> QueryBuilder:
        """ Discard everything pushed after the initial SQL, and allow pushes again """
        self._parts = [self.init] if self.init else []
        self._arguments = []
        self._built = False
        return self

    def as_text(self) -> sa.sql.expression.TextClause:
        """ Get the query as an SqlAlchemy text() clause with bound parameters

        Example:
            connection.execute(builder.as_text()).all()
        """
        chunks: list[str] = []
        after_bind = False
        for part in self._parts:
            if isinstance(part, str):
                chunk = _escape_colons(part)

                # A cast right after a placeholder: `:p1::int` has to become `:p1\:\:int`
                if after_bind:
                    chunk = LEADING_COLONS_REX.sub(lambda m: '\\:' * len(m.group()), chunk)

                chunks.append(chunk)
                after_bind = after_bind and not part
            else:
                chunks.append(PlaceholderStyle.NAMED.placeholder(part.n))
                after_bind = True

        sql = ''.join(chunks)
        params = {f'p{n}': value for n, value in enumerate(self._arguments, 1)}
        return sa.text(sql).bindparams(**params)

    def _check_not_built(self):
        if self._built:
            raise exc.QueryBuilderError('the query has already been built. Call reset() before reusing the builder')

    def __repr__(self):
        return f'{self.__class__.__name__}({self.sql!r}, arguments={self._arguments!r})'


class Separated:
    """ A sequence of pushes into a QueryBuilder, separated with a separator

    push() and push_bind() insert the separator before every item but the first one.
    push_unseparated() and push_bind_unseparated() never do: use them to decorate the current item.
    """

    def __init__(self, builder: QueryBuilder, separator: str):
        self.builder = builder
        self.separator = separator
        self.first = True

    __slots__ = 'builder', 'separator', 'first'

    def push(self, sql: str) -> Separated:
        self._push_separator()
        self.builder.push(sql)
        return self

    def push_bind(self, value: Any) -> Separated:
        self._push_separator()
        self.builder.push_bind(value)
        return self

    def push_unseparated(self, sql: str) -> Separated:
        self.builder.push(sql)
        return self

    def push_bind_unseparated(self, value: Any) -> Separated:
        self.builder.push_bind(value)
        return self

    def _push_separator(self):
        if not self.first:
            self.builder.push(self.separator)
        self.first = False


class _Bind(NamedTuple):
    """ Placeholder for the n-th bound argument (1-based) """
    n: int


def _escape_colons(sql: str) -> str:
    """ Escape ":name" in raw text so that text() won't take it for a bind parameter. "::" casts remain as they are """
    return COLON_NAME_REX.sub(r'\\:', sql)


# A colon that text() would see as a bind parameter
COLON_NAME_REX = re.compile(r'(?<![:\w\\]):(?=\w)')

# Colons at the very beginning of the text
LEADING_COLONS_REX = re.compile(r'^:+')
