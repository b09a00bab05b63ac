from typing import Optional

import pytest

from keysetql import PaginatorSettings, Paginator, Direction, exc


@pytest.mark.parametrize(('settings', 'size', 'expected_size'), [
    # No settings: as is
    (PaginatorSettings(), None, None),
    (PaginatorSettings(), 10, 10),
    # Default size
    (PaginatorSettings(default_size=20), None, 20),
    (PaginatorSettings(default_size=20), 0, 20),
    (PaginatorSettings(default_size=20), 10, 10),
    # Max size
    (PaginatorSettings(max_size=50), 10, 10),
    (PaginatorSettings(max_size=50), 100, 50),
    (PaginatorSettings(default_size=100, max_size=50), None, 50),
])
def test_get_final_size(settings: PaginatorSettings, size: Optional[int], expected_size: Optional[int]):
    assert settings.get_final_size(size) == expected_size


def test_paginator():
    """ Test: make paginators with settings """
    settings = PaginatorSettings(default_size=20, max_size=50)

    assert settings.paginator(Direction.FORWARD, ['ts', 'id']) == Paginator(Direction.FORWARD, 20, ('ts', 'id'))
    assert settings.paginator(True, ['id'], size=1000) == Paginator(Direction.BACKWARD, 50, ('id',))

    # Size unknown
    with pytest.raises(exc.PaginatorSettingsError):
        PaginatorSettings().paginator(Direction.FORWARD, ['id'])
