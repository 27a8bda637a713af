from datetime import datetime

import pytest

from api import RestaurantDiscoveryAPI
from main_system import RestaurantDiscoverySystem
from models import CuisineType, Location, Restaurant, UserPreferences
from exceptions import ValidationError


@pytest.fixture
def system():
    # Wednesday lunchtime
    return RestaurantDiscoverySystem(holidays=[], clock=lambda: datetime(2026, 10, 14, 12, 0))


@pytest.fixture
def api(system):
    return RestaurantDiscoveryAPI(system=system)


def test_system_loads_sample_catalog(system):
    assert system.catalog.count() == 10
    assert len(system.active_restaurants()) == 10


def test_system_without_sample_data():
    assert RestaurantDiscoverySystem(load_sample=False).catalog.count() == 0


def test_add_restaurant_is_validated(system):
    with pytest.raises(ValidationError):
        system.add_restaurant(Restaurant(id="new", name="X"))

    added = system.add_restaurant(Restaurant(id="new", name="新店", cuisine_type=CuisineType.CAFE))
    assert system.catalog.get_by_id("new") is added


def test_resolve_restaurant_by_id_or_name(system):
    assert system.resolve_restaurant("5").name == "屋馬燒肉國安店"
    assert system.resolve_restaurant("輕井澤鍋物").id == "8"


def test_search_by_price_level(api):
    result = api.search(price_level=4)
    assert result["success"]
    assert [r["name"] for r in result["restaurants"]] == ["屋馬燒肉國安店"]


def test_search_summary_fields(api):
    result = api.search(keyword="春水堂", latitude=24.1477, longitude=120.6736, radius_km=1)
    summary = result["restaurants"][0]
    assert summary["id"] == "1"
    assert summary["cuisine"] == "台式料理"
    assert summary["rating"] == 4.6
    assert summary["review_count"] == 8
    assert summary["price_range"] == "中等 ($200 - $500)"
    assert summary["open_now"] is True
    assert summary["distance_km"] == 0.0


def test_search_sorted_by_display_name(api):
    result = api.search(district="西屯區", sort_by="價格", descending=True)
    assert [r["name"] for r in result["restaurants"]] == [
        "屋馬燒肉國安店", "瓦城泰國料理台中店", "阿華大腸包小腸",
    ]


def test_invalid_search_reports_field(api):
    result = api.search(min_rating=4.5, max_rating=3.0)
    assert not result["success"]
    assert result["field"] == "min_rating"
    assert result["error_code"] == "VALIDATION_ERROR"


def test_fuzzy_and_global_search(api):
    assert [r["name"] for r in api.fuzzy_search("宮原")["restaurants"]] == ["宮原眼科"]
    assert api.global_search("鳳梨酥")["count"] == 2


def test_recommend_includes_match_scores(api):
    prefs = UserPreferences(favorite_cuisines={CuisineType.HOT_POT}, requires_parking=True)
    result = api.recommend(prefs, limit=3)
    assert result["success"]
    assert result["recommendations"][0]["name"] == "輕井澤鍋物公益店"
    scores = [r["match_score"] for r in result["recommendations"]]
    assert scores == sorted(scores, reverse=True)


def test_recommend_near_user(api):
    prefs = UserPreferences(user_location=Location(24.1477, 120.6736))
    result = api.recommend(prefs, limit=10)
    assert all("distance_km" in r for r in result["recommendations"])


def test_similar_excludes_reference(api):
    result = api.similar("春水堂創始店")
    assert result["success"]
    assert result["reference"] == "春水堂創始店"
    assert "1" not in [r["id"] for r in result["restaurants"]]
    assert all(r["similarity"] > 0.2 for r in result["restaurants"])


def test_unknown_restaurant(api):
    assert not api.similar("zzzzzzzzzz")["success"]
    assert not api.restaurant_details("zzzzzzzzzz")["success"]


def test_popular(api):
    result = api.popular(5)
    assert 0 < result["count"] <= 5
    popularity = [r["popularity"] for r in result["restaurants"]]
    assert popularity == sorted(popularity, reverse=True)


def test_top_picks_and_budget(api):
    assert api.top_picks(24.1477, 120.6736, 3)["count"] == 3
    budget = api.budget(100)
    assert {r["name"] for r in budget["restaurants"]} == {
        "阿華大腸包小腸", "一心豆干", "東海蓮心冰雞爪凍", "王記菜頭粿糯米腸",
    }
    assert api.budget(0)["count"] == 0


def test_restaurant_details(api):
    details = api.restaurant_details("1")["restaurant"]
    assert details["weekly_hours"] == 98.0
    assert details["hours_summary"] == "每日營業"
    assert details["rating_distribution"] == [0, 0, 0, 3, 5]
    assert details["effective_price"] == 250
    assert details["next_open"] == "2026-10-14T12:00"


def test_price_stats(api):
    stats = api.price_stats()["stats"]
    assert stats["count"] == 10
    assert stats["min"] == 50
    assert stats["max"] == 1200
    assert stats["median"] == 250


def test_add_review(api, system):
    result = api.add_review("1", 5, comment="超好喝", user_name="小明")
    assert result["success"]
    assert system.catalog.get_by_id("1").review_count == 9


def test_add_review_rejections(api):
    invalid = api.add_review("1", 6)
    assert not invalid["success"]
    assert invalid["field"] == "rating"

    missing = api.add_review("404", 4)
    assert not missing["success"]
    assert missing["restaurant_id"] == "404"


def test_system_status(api):
    status = api.system_status()
    assert status["restaurants"] == 10
    assert status["active_restaurants"] == 10
    assert status["holidays"] == 0
    assert status["open_now"] == 9
