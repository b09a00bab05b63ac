class BaseKeysetqlException(Exception):
    pass


class QueryBuilderError(BaseKeysetqlException):
    """ The QueryBuilder was used incorrectly

    Reported when text is pushed into a builder that has already been built
    """

    def __init__(self, err: str):
        super().__init__(f'Query builder error: {err}')


class PaginatorSettingsError(BaseKeysetqlException):
    """ PaginatorSettings could not produce a Paginator

    Reported when neither the page size nor the default page size is known
    """


class InvalidColumnError(BaseKeysetqlException):
    """ Pagination mentioned an invalid column name

    Reported when a column mentioned by name is not found on the SqlAlchemy table or model
    """

    def __init__(self, model: str, column_name: str, where: str):
        self.model = model
        self.column_name = column_name
        self.where = where

        super().__init__(f'Invalid column "{column_name}" for "{model}" specified in {where}')


class CursorError(BaseKeysetqlException):
    """ The cursor tuple does not match the pagination columns """

    def __init__(self, columns: tuple[str, ...], cursor: tuple):
        self.columns = columns
        self.cursor = cursor

        super().__init__(f'Cursor {cursor!r} has {len(cursor)} values, but pagination uses {len(columns)} columns: {columns!r}')
