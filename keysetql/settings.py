from __future__ import annotations

import dataclasses
from collections import abc
from typing import Optional, Union

from keysetql import exc
from .paginator import Paginator, Direction


@dataclasses.dataclass
class PaginatorSettings:
    """ Settings for Paginators

    Keep one of these per API endpoint (or per application) to make paginators
    with consistent page sizes: a default one, and a hard upper limit.
    """
    # The page size you get by default, if not specified
    default_size: Optional[int] = None

    # The max number of rows per page, regardless of the requested size
    max_size: Optional[int] = None

    def get_final_size(self, size: Optional[int]) -> Optional[int]:
        """ Fine-tune the page size by applying default and max sizes """
        # Apply default size
        if not size:
            size = self.default_size

        # Apply max size
        if size and self.max_size:
            size = min(size, self.max_size)

        # Done
        return size

    def paginator(self, direction: Union[bool, Direction], columns: abc.Iterable[str], size: Optional[int] = None) -> Paginator:
        """ Make a Paginator with the page size adjusted by these settings

        Args:
            direction: Pagination direction, or `smaller: bool`
            columns: Sort rows using these columns
            size: The requested page size, if any

        Raises:
            exc.PaginatorSettingsError: no `size` given and no `default_size` configured
        """
        final_size = self.get_final_size(size)
        if not final_size:
            raise exc.PaginatorSettingsError('Page size is unknown: provide `size`, or configure `default_size`')

        return Paginator.new(direction, final_size, columns)
