"""
validation.py
Field-level validation for restaurants, reviews, menus and search requests
"""

import re
from typing import Optional

from models import BusinessHours, Location, MenuItem, Restaurant, Review, SearchCriteria
from exceptions import ValidationError

BLOCKED_WORDS = ("spam", "scam", "fake")
PHONE_FORMATTING = re.compile(r'[\s\-()+]')
POSTAL_CODE_PATTERNS = (re.compile(r'\d{3,5}'), re.compile(r'[A-Za-z0-9\s\-]{3,10}'))

MAX_MENU_PRICE = 100000


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class InputValidator:
    """Raises ValidationError naming the first offending field"""

    def validate_restaurant(self, restaurant: Optional[Restaurant]) -> None:
        if restaurant is None:
            raise ValidationError("Restaurant cannot be None", "restaurant")

        if _blank(restaurant.id):
            raise ValidationError("Restaurant ID is required", "id", "REQUIRED")
        if len(restaurant.id) > 50:
            raise ValidationError("Restaurant ID cannot exceed 50 characters", "id")

        if _blank(restaurant.name):
            raise ValidationError("Restaurant name is required", "name", "REQUIRED")
        if len(restaurant.name) < 2:
            raise ValidationError("Restaurant name must be at least 2 characters", "name")
        if len(restaurant.name) > 100:
            raise ValidationError("Restaurant name cannot exceed 100 characters", "name")

        if not 0 <= restaurant.price_level <= 4:
            raise ValidationError("Price level must be between 0 and 4", "price_level")
        if restaurant.average_price < 0:
            raise ValidationError("Average price cannot be negative", "average_price")
        if restaurant.capacity < 0:
            raise ValidationError("Capacity cannot be negative", "capacity")

        if restaurant.phone_number and not self.is_valid_phone_number(restaurant.phone_number):
            raise ValidationError("Invalid phone number format", "phone_number", "INVALID_FORMAT")
        if restaurant.website and not self.is_valid_url(restaurant.website):
            raise ValidationError("Invalid website URL format", "website", "INVALID_FORMAT")

        if restaurant.location is not None:
            self.validate_location(restaurant.location)
        if restaurant.business_hours is not None:
            self.validate_business_hours(restaurant.business_hours)

    def validate_location(self, location: Optional[Location]) -> None:
        if location is None:
            raise ValidationError("Location cannot be None", "location")

        if not -90 <= location.latitude <= 90:
            raise ValidationError("Latitude must be between -90 and 90", "latitude")
        if not -180 <= location.longitude <= 180:
            raise ValidationError("Longitude must be between -180 and 180", "longitude")

        if location.city is not None:
            if len(location.city) > 100:
                raise ValidationError("City name cannot exceed 100 characters", "city")
            if location.city and len(location.city) < 2:
                raise ValidationError("City name must be at least 2 characters", "city")

        if location.address is not None and len(location.address) > 200:
            raise ValidationError("Address cannot exceed 200 characters", "address")

        if location.postal_code and not self.is_valid_postal_code(location.postal_code):
            raise ValidationError("Invalid postal code format", "postal_code", "INVALID_FORMAT")

    def validate_review(self, review: Optional[Review]) -> None:
        if review is None:
            raise ValidationError("Review cannot be None", "review")

        if _blank(review.id):
            raise ValidationError("Review ID is required", "id", "REQUIRED")
        if _blank(review.restaurant_id):
            raise ValidationError("Restaurant ID is required for review", "restaurant_id", "REQUIRED")

        if not 1 <= review.rating <= 5:
            raise ValidationError("Rating must be between 1 and 5", "rating")

        if review.comment is not None:
            if len(review.comment) > 2000:
                raise ValidationError("Comment cannot exceed 2000 characters", "comment")
            if self.contains_blocked_words(review.comment):
                raise ValidationError("Comment contains inappropriate content", "comment", "INAPPROPRIATE_CONTENT")

        if not 1 <= review.user_level <= 5:
            raise ValidationError("User level must be between 1 and 5", "user_level")
        if review.helpful_count < 0:
            raise ValidationError("Helpful count cannot be negative", "helpful_count")

        if review.user_name is not None:
            if len(review.user_name) < 2:
                raise ValidationError("User name must be at least 2 characters", "user_name")
            if len(review.user_name) > 50:
                raise ValidationError("User name cannot exceed 50 characters", "user_name")

    def validate_search_criteria(self, criteria: Optional[SearchCriteria]) -> None:
        if criteria is None:
            raise ValidationError("Search criteria cannot be None", "criteria")

        if criteria.keyword is not None and len(criteria.keyword) > 100:
            raise ValidationError("Search keyword cannot exceed 100 characters", "keyword")

        if criteria.min_rating is not None and not 0 <= criteria.min_rating <= 5:
            raise ValidationError("Minimum rating must be between 0 and 5", "min_rating")
        if criteria.max_rating is not None and not 0 <= criteria.max_rating <= 5:
            raise ValidationError("Maximum rating must be between 0 and 5", "max_rating")
        if (criteria.min_rating is not None and criteria.max_rating is not None
                and criteria.min_rating > criteria.max_rating):
            raise ValidationError("Minimum rating cannot exceed maximum rating", "min_rating")

        if criteria.min_price is not None and criteria.min_price < 0:
            raise ValidationError("Minimum price cannot be negative", "min_price")
        if criteria.max_price is not None and criteria.max_price < 0:
            raise ValidationError("Maximum price cannot be negative", "max_price")
        if (criteria.min_price is not None and criteria.max_price is not None
                and criteria.min_price > criteria.max_price):
            raise ValidationError("Minimum price cannot exceed maximum price", "min_price")

        if criteria.price_level is not None and not 1 <= criteria.price_level <= 4:
            raise ValidationError("Price level must be between 1 and 4", "price_level")

        if criteria.has_location_filter():
            if not -90 <= criteria.latitude <= 90:
                raise ValidationError("Latitude must be between -90 and 90", "latitude")
            if not -180 <= criteria.longitude <= 180:
                raise ValidationError("Longitude must be between -180 and 180", "longitude")
            if not 0 < criteria.radius_km <= 100:
                raise ValidationError("Radius must be between 0 and 100 km", "radius_km")

        if not 1 <= criteria.limit <= 100:
            raise ValidationError("Limit must be between 1 and 100", "limit")
        if criteria.offset < 0:
            raise ValidationError("Offset cannot be negative", "offset")

    def validate_business_hours(self, hours: Optional[BusinessHours]) -> None:
        if hours is None:
            raise ValidationError("Business hours cannot be None", "business_hours")

        for slot in (hours.weekly_hours or {}).values():
            if slot is None:
                continue
            if slot.open_time is None:
                raise ValidationError("Open time is required", "open_time", "REQUIRED")
            if slot.close_time is None:
                raise ValidationError("Close time is required", "close_time", "REQUIRED")

    def validate_menu_item(self, item: Optional[MenuItem]) -> None:
        if item is None:
            raise ValidationError("Menu item cannot be None", "menu_item")

        if _blank(item.id):
            raise ValidationError("Menu item ID is required", "id", "REQUIRED")
        if _blank(item.name):
            raise ValidationError("Menu item name is required", "name", "REQUIRED")
        if len(item.name) > 100:
            raise ValidationError("Menu item name cannot exceed 100 characters", "name")

        if item.price < 0:
            raise ValidationError("Price cannot be negative", "price")
        if item.price > MAX_MENU_PRICE:
            raise ValidationError("Price exceeds maximum allowed value", "price")
        if item.calories < 0:
            raise ValidationError("Calories cannot be negative", "calories")

        if item.description is not None and len(item.description) > 500:
            raise ValidationError("Description cannot exceed 500 characters", "description")
        if item.category is not None and len(item.category) > 50:
            raise ValidationError("Category cannot exceed 50 characters", "category")

    # Format helpers

    @staticmethod
    def is_valid_phone_number(phone: Optional[str]) -> bool:
        """7 to 15 digits once spaces, dashes, parentheses and '+' are removed"""
        if not phone:
            return False
        digits = PHONE_FORMATTING.sub('', phone)
        return digits.isascii() and digits.isdigit() and 7 <= len(digits) <= 15

    @staticmethod
    def is_valid_url(url: Optional[str]) -> bool:
        return bool(url) and url.startswith(("http://", "https://"))

    @staticmethod
    def is_valid_postal_code(postal_code: Optional[str]) -> bool:
        """Taiwan 3/5-digit codes or a generic alphanumeric code"""
        if not postal_code:
            return False
        return any(pattern.fullmatch(postal_code) for pattern in POSTAL_CODE_PATTERNS)

    @staticmethod
    def contains_blocked_words(text: Optional[str]) -> bool:
        if not text:
            return False
        lowered = text.lower()
        return any(word in lowered for word in BLOCKED_WORDS)
