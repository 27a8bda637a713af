import pytest

from exceptions import ValidationError
from models import BusinessHours, Location, MenuItem, Review, SearchCriteria, TimeSlot
from tests.factories import make_restaurant
from validation import InputValidator


@pytest.fixture
def validator():
    return InputValidator()


def field_of(call, *args):
    with pytest.raises(ValidationError) as excinfo:
        call(*args)
    return excinfo.value


def test_valid_restaurant_passes(validator):
    restaurant = make_restaurant(phone_number="04-2229-7991", website="https://example.com", price_level=2)
    validator.validate_restaurant(restaurant)


@pytest.mark.parametrize("fields, field, code", [
    ({"restaurant_id": " "}, "id", "REQUIRED"),
    ({"restaurant_id": "x" * 51}, "id", "VALIDATION_ERROR"),
    ({"name": ""}, "name", "REQUIRED"),
    ({"name": "A"}, "name", "VALIDATION_ERROR"),
    ({"price_level": 5}, "price_level", "VALIDATION_ERROR"),
    ({"average_price": -1}, "average_price", "VALIDATION_ERROR"),
    ({"phone_number": "12345"}, "phone_number", "INVALID_FORMAT"),
    ({"website": "ftp://example.com"}, "website", "INVALID_FORMAT"),
    ({"latitude": 95.0}, "latitude", "VALIDATION_ERROR"),
])
def test_invalid_restaurant_fields(validator, fields, field, code):
    error = field_of(validator.validate_restaurant, make_restaurant(**fields))
    assert error.field == field
    assert error.error_code == code


def test_none_restaurant(validator):
    assert field_of(validator.validate_restaurant, None).field == "restaurant"


def test_location_rules(validator):
    validator.validate_location(Location(24.1, 120.6, city="台中市", postal_code="403"))
    assert field_of(validator.validate_location, Location(0, 181)).field == "longitude"
    assert field_of(validator.validate_location, Location(0, 0, city="X")).field == "city"
    assert field_of(validator.validate_location, Location(0, 0, address="x" * 201)).field == "address"
    assert field_of(validator.validate_location, Location(0, 0, postal_code="!!")).error_code == "INVALID_FORMAT"


def test_review_rules(validator):
    validator.validate_review(Review(id="r", restaurant_id="1", rating=5, comment="好吃", user_name="Amy"))

    assert field_of(validator.validate_review, Review(id="r", restaurant_id="1", rating=6)).field == "rating"
    assert field_of(validator.validate_review, Review(id="r", restaurant_id="", rating=4)).error_code == "REQUIRED"
    assert field_of(validator.validate_review,
                    Review(id="r", restaurant_id="1", rating=4, user_level=0)).field == "user_level"
    assert field_of(validator.validate_review,
                    Review(id="r", restaurant_id="1", rating=4, user_name="A")).field == "user_name"
    assert field_of(validator.validate_review,
                    Review(id="r", restaurant_id="1", rating=4, helpful_count=-1)).field == "helpful_count"


def test_review_with_blocked_words(validator):
    review = Review(id="r", restaurant_id="1", rating=1, comment="This place is a SCAM")
    error = field_of(validator.validate_review, review)
    assert error.field == "comment"
    assert error.error_code == "INAPPROPRIATE_CONTENT"


@pytest.mark.parametrize("criteria, field", [
    (SearchCriteria().with_keyword("x" * 101), "keyword"),
    (SearchCriteria().with_rating_range(4.5, 3.0), "min_rating"),
    (SearchCriteria().with_rating_range(None, 6), "max_rating"),
    (SearchCriteria().with_price_range(-5), "min_price"),
    (SearchCriteria().with_price_range(500, 100), "min_price"),
    (SearchCriteria().with_price_level(0), "price_level"),
    (SearchCriteria().near_location(24.1, 120.6, 150), "radius_km"),
    (SearchCriteria().near_location(-91, 120.6, 5), "latitude"),
    (SearchCriteria().with_limit(0), "limit"),
    (SearchCriteria().with_limit(101), "limit"),
    (SearchCriteria().with_offset(-1), "offset"),
])
def test_invalid_search_criteria(validator, criteria, field):
    assert field_of(validator.validate_search_criteria, criteria).field == field


def test_valid_search_criteria(validator):
    criteria = (SearchCriteria().with_keyword("tea").with_rating_range(4.0, 5.0)
                .near_location(24.1, 120.6, 5).with_limit(100))
    validator.validate_search_criteria(criteria)


def test_business_hours_need_both_times(validator):
    hours = BusinessHours(weekly_hours={0: TimeSlot(None, None)})
    assert field_of(validator.validate_business_hours, hours).field == "open_time"
    validator.validate_business_hours(BusinessHours(weekly_hours={0: None}))


def test_menu_item_rules(validator):
    validator.validate_menu_item(MenuItem(id="m1", name="牛肉麵", price=180))
    assert field_of(validator.validate_menu_item, MenuItem(id="m1", name="牛肉麵", price=-1)).field == "price"
    assert field_of(validator.validate_menu_item, MenuItem(id="m1", name="牛肉麵", price=100001)).field == "price"
    assert field_of(validator.validate_menu_item, MenuItem(id="m1", name=" ")).error_code == "REQUIRED"
    assert field_of(validator.validate_menu_item,
                    MenuItem(id="m1", name="湯", calories=-10)).field == "calories"


def test_phone_numbers():
    assert InputValidator.is_valid_phone_number("+886 (4) 2229-7991")
    assert not InputValidator.is_valid_phone_number("123456")
    assert not InputValidator.is_valid_phone_number("０４２２２９７９９１")
    assert not InputValidator.is_valid_phone_number(None)


def test_postal_codes():
    assert InputValidator.is_valid_postal_code("403")
    assert InputValidator.is_valid_postal_code("40341")
    assert InputValidator.is_valid_postal_code("SW1A 1AA")
    assert not InputValidator.is_valid_postal_code("12")


def test_validation_error_to_dict():
    error = ValidationError("Rating must be between 1 and 5", "rating")
    assert error.to_dict() == {
        "error": "Rating must be between 1 and 5",
        "field": "rating",
        "error_code": "VALIDATION_ERROR",
    }
    assert isinstance(error, ValueError)
