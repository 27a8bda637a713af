from datetime import datetime, time, timedelta

import pytest

from catalog import RestaurantCatalog
from data_processor import CatalogImporter, DataProcessor, load_sample_data
from models import CuisineType


def test_parse_cuisine_type():
    assert DataProcessor.parse_cuisine_type("火鍋") is CuisineType.HOT_POT
    assert DataProcessor.parse_cuisine_type("hot_pot") is CuisineType.HOT_POT
    assert DataProcessor.parse_cuisine_type(float("nan")) is CuisineType.OTHER
    assert DataProcessor.parse_cuisine_type("spaceship food") is CuisineType.OTHER


def test_parse_additional_cuisines():
    assert DataProcessor.parse_additional_cuisines("CAFE; 甜點") == [CuisineType.CAFE, CuisineType.DESSERT]
    assert DataProcessor.parse_additional_cuisines(None) == []


@pytest.mark.parametrize("raw, level", [
    ("$$", 2), ("$$$$$", 4), ("3", 3), ("2.0", 2), ("7", 0), ("cheap", 0), (None, 0), ("-", 0),
])
def test_parse_price_level(raw, level):
    assert DataProcessor.parse_price_level(raw) == level


def test_parse_price():
    assert DataProcessor.parse_price("$1,200") == 1200.0
    assert DataProcessor.parse_price("-50") == 0.0
    assert DataProcessor.parse_price("n/a") == 0.0


def test_parse_bool():
    assert DataProcessor.parse_bool("Yes")
    assert DataProcessor.parse_bool(True)
    assert not DataProcessor.parse_bool("no")
    assert not DataProcessor.parse_bool(None)


def test_parse_time():
    assert DataProcessor.parse_time("9:05") == time(9, 5)
    assert DataProcessor.parse_time("23:59") == time(23, 59)
    assert DataProcessor.parse_time("25:00") is None
    assert DataProcessor.parse_time("noon") is None


def test_parse_ratings_drops_bad_entries():
    assert DataProcessor.parse_ratings("5,x,7,3") == [5, 3]
    assert DataProcessor.parse_ratings("") == []


def test_build_daily_hours():
    hours = DataProcessor.build_daily_hours(time(16, 0), time(1, 0))
    assert all(hours.get_hours(day).is_overnight() for day in range(7))
    assert DataProcessor.build_daily_hours(None, time(1, 0)) is None


def test_build_seed_reviews():
    now = datetime(2026, 10, 14, 12, 0)
    reviews = DataProcessor.build_seed_reviews("7", [5, 4], now)
    assert [r.id for r in reviews] == ["review_7_0", "review_7_1"]
    assert [r.created_at for r in reviews] == [now - timedelta(days=2), now - timedelta(days=1)]
    assert all(r.comment == "很棒的用餐體驗！" for r in reviews)


def test_load_sample_data(sample_catalog):
    assert sample_catalog.count() == 10

    tea = sample_catalog.get_by_id("1")
    assert tea.name == "春水堂創始店"
    assert tea.cuisine_type is CuisineType.TAIWANESE
    assert tea.location.district == "西區"
    assert tea.price_level == 2
    assert tea.average_price == 250
    assert tea.has_delivery and not tea.has_parking
    assert tea.review_count == 8
    assert tea.reviews[0].id == "review_1_0"

    night_market = sample_catalog.get_by_id("3")
    assert night_market.business_hours.get_hours(0).is_overnight()


def test_import_skips_unparseable_rows(tmp_path):
    csv_file = tmp_path / "restaurants.csv"
    csv_file.write_text(
        " id , name ,latitude,longitude,ratings\n"
        "1,Good Place,24.1,120.6,\"5,4\"\n"
        "2,Bad Place,abc,120.6,\n"
        "3,,24.1,120.6,\n",
        encoding="utf-8",
    )
    catalog = RestaurantCatalog()
    imported = CatalogImporter(catalog).import_from_csv(str(csv_file))

    assert [r.id for r in imported] == ["1"]
    assert catalog.count() == 1
    assert catalog.get_by_id("1").review_count == 2


def test_import_requires_id_and_name_columns(tmp_path):
    csv_file = tmp_path / "restaurants.csv"
    csv_file.write_text("id,title\n1,Somewhere\n", encoding="utf-8")
    with pytest.raises(ValueError):
        CatalogImporter(RestaurantCatalog()).import_from_csv(str(csv_file))


def test_load_sample_data_from_custom_path(tmp_path):
    csv_file = tmp_path / "one.csv"
    csv_file.write_text("id,name,cuisine\nx1,Only One,THAI\n", encoding="utf-8")
    catalog = RestaurantCatalog()
    load_sample_data(catalog, str(csv_file))
    assert catalog.get_by_id("x1").cuisine_type is CuisineType.THAI
    assert catalog.get_by_id("x1").location is None
