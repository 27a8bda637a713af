import pytest

from models import MenuItem
from price_analyzer import PriceAnalyzer
from tests.factories import make_restaurant


@pytest.fixture
def analyzer():
    return PriceAnalyzer()


def priced(restaurant_id, price, ratings=(), **fields):
    return make_restaurant(restaurant_id, name=f"Place {restaurant_id}", average_price=price,
                           ratings=ratings, **fields)


def test_effective_price_uses_available_menu_items(analyzer):
    restaurant = priced("r1", 999)
    restaurant.add_menu_item(MenuItem(id="a", name="Rice", price=100))
    restaurant.add_menu_item(MenuItem(id="b", name="Noodles", price=200))
    restaurant.add_menu_item(MenuItem(id="c", name="Seasonal", price=999, available=False))
    restaurant.add_menu_item(MenuItem(id="d", name="Water", price=0))
    assert analyzer.effective_price(restaurant) == 150.0


def test_effective_price_rounds_to_cents(analyzer):
    restaurant = priced("r1", 0)
    for i, price in enumerate([100, 100, 101]):
        restaurant.add_menu_item(MenuItem(id=str(i), name=f"Dish {i}", price=price))
    assert analyzer.effective_price(restaurant) == 100.33


def test_effective_price_falls_back_to_average_price(analyzer):
    assert analyzer.effective_price(priced("r1", 350)) == 350
    assert analyzer.effective_price(None) == 0.0


@pytest.mark.parametrize("price, level", [
    (0, 0), (150, 1), (199.99, 1), (200, 2), (499.99, 2), (500, 3), (999, 3), (1000, 4), (5000, 4),
])
def test_categorize_price_level_from_price(analyzer, price, level):
    assert analyzer.categorize_price_level(priced("r1", price)) == level


def test_stored_price_level_wins(analyzer):
    restaurant = priced("r1", 80, price_level=3)
    assert analyzer.categorize_price_level(restaurant) == 3


def test_categorization_is_idempotent(analyzer):
    """Test storing a derived level does not change the answer"""
    restaurant = priced("r1", 420)
    level = analyzer.categorize_price_level(restaurant)
    restaurant.price_level = level
    assert analyzer.categorize_price_level(restaurant) == level == 2


def test_price_statistics_uses_upper_median(analyzer):
    restaurants = [priced("a", 100), priced("b", 300), priced("c", 200), priced("d", 400), priced("e", 0)]
    stats = analyzer.price_statistics(restaurants)
    assert stats.count == 4
    assert stats.min_price == 100
    assert stats.max_price == 400
    assert stats.average_price == 250
    assert stats.median_price == 300


def test_price_statistics_of_empty_set(analyzer):
    stats = analyzer.price_statistics([])
    assert stats.count == 0
    assert stats.median_price == 0.0


def test_recommend_by_budget_ranks_by_value(analyzer):
    cheap = priced("cheap", 100, ratings=[4])
    stretch = priced("stretch", 220, ratings=[5])
    too_much = priced("too_much", 221, ratings=[5])
    unpriced = priced("unpriced", 0, ratings=[5])

    assert analyzer.recommend_by_budget([stretch, too_much, unpriced, cheap], 200) == [cheap, stretch]
    assert analyzer.recommend_by_budget([cheap], 0) == []


def test_filter_by_price_range(analyzer):
    low, high, unknown = priced("low", 80), priced("high", 900), priced("unknown", 0)
    assert analyzer.filter_by_price_range([low, high, unknown], 50, 100) == [low]
    assert analyzer.filter_by_price_range([low, high, unknown], min_price=500) == [high]
    assert analyzer.filter_by_price_range([low, high], 500, 100) == []


def test_filter_by_price_level(analyzer):
    low, high = priced("low", 80), priced("high", 900)
    assert analyzer.filter_by_price_level([low, high], 3) == [high]
    assert analyzer.filter_by_price_level([low, high], 7) == [low, high]


def test_sort_by_price(analyzer):
    low, high = priced("low", 80), priced("high", 900)
    assert analyzer.sort_by_price([high, low]) == [low, high]
    assert analyzer.sort_by_price([low, high], ascending=False) == [high, low]


def test_price_range_description(analyzer):
    assert analyzer.price_range_description(priced("r1", 120)) == "平價 (< $200)"
    assert analyzer.price_range_description(priced("r1", 0, price_level=4)) == "奢華 (> $1000)"
    assert analyzer.price_range_description(priced("r1", 0)) == "未知"


def test_is_affordable(analyzer):
    reference = [priced("a", 100), priced("b", 400)]
    assert analyzer.is_affordable(priced("r1", 299), reference)
    assert not analyzer.is_affordable(priced("r1", 301), reference)
    assert analyzer.is_affordable(priced("r1", 5000), [])
    assert not analyzer.is_affordable(None, reference)


def test_recommend_by_budget_skips_inactive(analyzer):
    closed = priced("closed", 100, ratings=[5], active=False)
    open_one = priced("open", 150, ratings=[4])
    assert analyzer.recommend_by_budget([closed, open_one], 200) == [open_one]
