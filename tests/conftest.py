from datetime import datetime

import pytest

from catalog import RestaurantCatalog
from business_hours import BusinessHoursEngine
from data_processor import load_sample_data
from search_service import RestaurantSearchService


@pytest.fixture
def sample_catalog():
    """The bundled ten-restaurant Taichung catalog"""
    catalog = RestaurantCatalog()
    load_sample_data(catalog)
    return catalog


@pytest.fixture
def early_morning():
    # Wednesday 07:00, only the breakfast stall is open
    return datetime(2026, 10, 14, 7, 0)


@pytest.fixture
def search_service(sample_catalog, early_morning):
    hours = BusinessHoursEngine(holidays=[], clock=lambda: early_morning)
    return RestaurantSearchService(sample_catalog, business_hours=hours)
