import pytest

from catalog import RestaurantCatalog
from exceptions import RestaurantNotFoundError
from tests.factories import make_restaurant


@pytest.fixture
def catalog():
    catalog = RestaurantCatalog()
    catalog.save(make_restaurant("1", name="Golden Dragon"))
    catalog.save(make_restaurant("2", name="Dragon Noodles"))
    catalog.save(make_restaurant("3", name="Sunny Cafe"))
    return catalog


def test_save_and_lookup(catalog):
    assert catalog.count() == 3
    assert catalog.exists("2")
    assert catalog.find_by_id("2").name == "Dragon Noodles"
    assert catalog.find_by_id("missing") is None
    assert catalog.find_by_id(None) is None


def test_save_replaces_same_id(catalog):
    catalog.save(make_restaurant("3", name="Sunny Bistro"))
    assert catalog.count() == 3
    assert catalog.get_by_id("3").name == "Sunny Bistro"


def test_save_rejects_missing_id():
    catalog = RestaurantCatalog()
    with pytest.raises(ValueError):
        catalog.save(None)
    with pytest.raises(ValueError):
        catalog.save(make_restaurant("  "))


def test_get_by_id_raises_for_unknown_id(catalog):
    with pytest.raises(RestaurantNotFoundError) as excinfo:
        catalog.get_by_id("42")
    assert excinfo.value.restaurant_id == "42"
    assert "42" in str(excinfo.value)


def test_find_all_keeps_insertion_order(catalog):
    assert [r.id for r in catalog.find_all()] == ["1", "2", "3"]


def test_find_by_name_substring(catalog):
    assert [r.id for r in catalog.find_by_name("dragon")] == ["1", "2"]
    assert catalog.find_by_name("") == []


def test_find_best_name_match(catalog):
    assert catalog.find_best_name_match("golden dragn").id == "1"
    assert catalog.find_best_name_match("zzzzzz") is None
    assert catalog.find_best_name_match(None) is None


def test_best_name_match_on_sample_data(sample_catalog):
    assert sample_catalog.find_best_name_match("春水堂").name == "春水堂創始店"


def test_delete(catalog):
    catalog.delete("1")
    catalog.delete("missing")
    assert not catalog.exists("1")
    assert catalog.count() == 2

    catalog.delete_all()
    assert catalog.count() == 0
    assert catalog.find_all() == []
