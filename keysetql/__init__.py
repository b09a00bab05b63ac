from importlib.metadata import version as _version

__version__ = _version('keysetql')

from .paginator import Paginator, Direction
from .query_builder import QueryBuilder, PlaceholderStyle, BuiltQuery, Separated
from .settings import PaginatorSettings

from . import exc


# TODO: expand the row comparison into `c1 > v1 OR (c1 = v1 AND c2 > v2) ...` to support mixed asc/desc sorting
