"""
models.py
Core data models for the Restaurant Discovery Engine
"""

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Dict, List, Optional, Set

import pandas as pd


class CuisineType(str, Enum):
    """Cuisine categories with their display names"""
    CHINESE = "CHINESE"
    JAPANESE = "JAPANESE"
    KOREAN = "KOREAN"
    ITALIAN = "ITALIAN"
    FRENCH = "FRENCH"
    AMERICAN = "AMERICAN"
    MEXICAN = "MEXICAN"
    THAI = "THAI"
    VIETNAMESE = "VIETNAMESE"
    INDIAN = "INDIAN"
    TAIWANESE = "TAIWANESE"
    SEAFOOD = "SEAFOOD"
    VEGETARIAN = "VEGETARIAN"
    FAST_FOOD = "FAST_FOOD"
    CAFE = "CAFE"
    DESSERT = "DESSERT"
    BBQ = "BBQ"
    HOT_POT = "HOT_POT"
    BUFFET = "BUFFET"
    OTHER = "OTHER"

    @property
    def display_name(self) -> str:
        return _CUISINE_DISPLAY_NAMES[self]

    @classmethod
    def from_display_name(cls, name: Optional[str]) -> "CuisineType":
        """Resolve a display name; unknown and blank names map to OTHER"""
        if name is None or not name.strip():
            return cls.OTHER
        name = name.strip()
        for cuisine, display in _CUISINE_DISPLAY_NAMES.items():
            if display == name:
                return cuisine
        return cls.OTHER

    @classmethod
    def from_value(cls, value: Optional[str]) -> "CuisineType":
        """Resolve either a member name (case-insensitive) or a display name"""
        if value is None or not str(value).strip():
            return cls.OTHER
        key = str(value).strip().upper().replace(' ', '_').replace('-', '_')
        if key in cls.__members__:
            return cls[key]
        return cls.from_display_name(str(value))


_CUISINE_DISPLAY_NAMES = {
    CuisineType.CHINESE: "中式料理",
    CuisineType.JAPANESE: "日式料理",
    CuisineType.KOREAN: "韓式料理",
    CuisineType.ITALIAN: "義式料理",
    CuisineType.FRENCH: "法式料理",
    CuisineType.AMERICAN: "美式料理",
    CuisineType.MEXICAN: "墨西哥料理",
    CuisineType.THAI: "泰式料理",
    CuisineType.VIETNAMESE: "越南料理",
    CuisineType.INDIAN: "印度料理",
    CuisineType.TAIWANESE: "台式料理",
    CuisineType.SEAFOOD: "海鮮",
    CuisineType.VEGETARIAN: "素食",
    CuisineType.FAST_FOOD: "速食",
    CuisineType.CAFE: "咖啡廳",
    CuisineType.DESSERT: "甜點",
    CuisineType.BBQ: "燒烤",
    CuisineType.HOT_POT: "火鍋",
    CuisineType.BUFFET: "自助餐",
    CuisineType.OTHER: "其他",
}


class SortType(str, Enum):
    """Result ordering keys"""
    NAME = "NAME"
    RATING = "RATING"
    PRICE = "PRICE"
    DISTANCE = "DISTANCE"
    REVIEW_COUNT = "REVIEW_COUNT"
    RELEVANCE = "RELEVANCE"

    @property
    def display_name(self) -> str:
        return _SORT_DISPLAY_NAMES[self]

    @classmethod
    def from_display_name(cls, name: Optional[str]) -> "SortType":
        if name is None or not name.strip():
            return cls.RELEVANCE
        name = name.strip()
        for sort_type, display in _SORT_DISPLAY_NAMES.items():
            if display == name or sort_type.value == name.upper():
                return sort_type
        return cls.RELEVANCE


_SORT_DISPLAY_NAMES = {
    SortType.NAME: "名稱",
    SortType.RATING: "評分",
    SortType.PRICE: "價格",
    SortType.DISTANCE: "距離",
    SortType.REVIEW_COUNT: "評論數",
    SortType.RELEVANCE: "相關性",
}


class RatingTrend(str, Enum):
    """Direction of a restaurant's ratings over time"""
    UNKNOWN = "UNKNOWN"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    IMPROVING = "IMPROVING"
    DECLINING = "DECLINING"
    STABLE = "STABLE"


@dataclass
class Location:
    """Geographic position and postal address"""
    latitude: float = 0.0
    longitude: float = 0.0
    address: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    postal_code: Optional[str] = None

    def is_valid(self) -> bool:
        return -90 <= self.latitude <= 90 and -180 <= self.longitude <= 180

    def full_address(self) -> str:
        parts = [self.postal_code, self.city, self.district, self.address]
        return ''.join(p for p in parts if p).strip()


@dataclass
class MenuItem:
    """Single dish on a restaurant menu"""
    id: str
    name: str
    price: float = 0.0
    description: Optional[str] = None
    category: Optional[str] = None
    vegetarian: bool = False
    vegan: bool = False
    gluten_free: bool = False
    spicy: bool = False
    available: bool = True
    calories: int = 0

    def matches_dietary_restrictions(self, vegetarian: bool = False, vegan: bool = False,
                                     gluten_free: bool = False) -> bool:
        if vegetarian and not self.vegetarian:
            return False
        if vegan and not self.vegan:
            return False
        if gluten_free and not self.gluten_free:
            return False
        return True

    def is_in_price_range(self, min_price: float, max_price: float) -> bool:
        if min_price < 0 or max_price < 0 or min_price > max_price:
            return False
        return min_price <= self.price <= max_price


@dataclass
class Review:
    """User review of a restaurant"""
    id: str
    restaurant_id: str
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = field(default_factory=datetime.now)
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_level: int = 1  # 1-5 reviewer credibility
    verified: bool = False
    helpful_count: int = 0
    updated_at: Optional[datetime] = None

    def is_valid(self) -> bool:
        return (1 <= self.rating <= 5
                and bool(self.restaurant_id and self.restaurant_id.strip())
                and 1 <= self.user_level <= 5)

    def is_recent(self) -> bool:
        """True when written within the last six calendar months"""
        if self.created_at is None:
            return False
        cutoff = pd.Timestamp.now() - pd.DateOffset(months=6)
        return pd.Timestamp(self.created_at) > cutoff


@dataclass
class TimeSlot:
    """Opening window within a day; close before open means it runs past midnight"""
    open_time: time
    close_time: time

    def is_overnight(self) -> bool:
        return self.close_time < self.open_time

    def contains(self, moment: time) -> bool:
        if moment is None:
            return False
        if self.is_overnight():
            return moment >= self.open_time or moment <= self.close_time
        return self.open_time <= moment <= self.close_time


@dataclass
class BusinessHours:
    """Weekly schedule keyed by datetime.weekday() (0 = Monday)"""
    weekly_hours: Dict[int, Optional[TimeSlot]] = field(default_factory=dict)
    closed_on_holidays: bool = False

    def set_hours(self, day: int, open_time: Optional[time], close_time: Optional[time]) -> None:
        if open_time is None or close_time is None:
            return
        self.weekly_hours[day] = TimeSlot(open_time, close_time)

    def set_closed(self, day: int) -> None:
        self.weekly_hours[day] = None

    def get_hours(self, day: int) -> Optional[TimeSlot]:
        return self.weekly_hours.get(day)

    def is_open_at(self, moment: datetime) -> bool:
        slot = self.get_hours(moment.weekday())
        return slot is not None and slot.contains(moment.time())


@dataclass(eq=False)
class Restaurant:
    """Core restaurant data model"""
    id: str
    name: str
    cuisine_type: Optional[CuisineType] = None
    location: Optional[Location] = None
    description: Optional[str] = None
    additional_cuisine_types: Set[CuisineType] = field(default_factory=set)
    menu: List[MenuItem] = field(default_factory=list)
    reviews: List[Review] = field(default_factory=list)
    business_hours: Optional[BusinessHours] = None
    average_price: float = 0.0
    price_level: int = 0  # 0 unknown, 1-4 scale
    active: bool = True
    phone_number: Optional[str] = None
    website: Optional[str] = None
    capacity: int = 0
    has_delivery: bool = False
    has_takeout: bool = False
    has_parking: bool = False
    accepts_reservations: bool = False

    def __eq__(self, other) -> bool:
        if not isinstance(other, Restaurant):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def review_count(self) -> int:
        return len(self.reviews)

    @property
    def menu_item_count(self) -> int:
        return len(self.menu)

    def has_cuisine_type(self, cuisine: Optional[CuisineType]) -> bool:
        if cuisine is None:
            return False
        return self.cuisine_type == cuisine or cuisine in self.additional_cuisine_types

    def add_cuisine_type(self, cuisine: Optional[CuisineType]) -> None:
        if cuisine is not None:
            self.additional_cuisine_types.add(cuisine)

    def add_review(self, review: Optional[Review]) -> None:
        if review is not None:
            self.reviews.append(review)

    def add_menu_item(self, item: Optional[MenuItem]) -> None:
        if item is not None:
            self.menu.append(item)

    def matches_keyword(self, keyword: Optional[str]) -> bool:
        """Case-insensitive substring match over name, description, cuisine, city and address"""
        if keyword is None or not keyword.strip():
            return True
        needle = keyword.lower()
        haystacks = [self.name, self.description]
        if self.cuisine_type is not None:
            haystacks.append(self.cuisine_type.display_name)
        if self.location is not None:
            haystacks.extend([self.location.city, self.location.address])
        return any(h and needle in h.lower() for h in haystacks)


@dataclass
class SearchCriteria:
    """Fluent search request; every with_* call mutates and returns self"""
    keyword: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    cuisine_type: Optional[CuisineType] = None
    cuisine_types: Set[CuisineType] = field(default_factory=set)
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    price_level: Optional[int] = None
    open_now: Optional[bool] = None
    has_delivery: Optional[bool] = None
    has_takeout: Optional[bool] = None
    has_parking: Optional[bool] = None
    accepts_reservations: Optional[bool] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_km: Optional[float] = None
    sort_by: Optional[SortType] = None
    ascending: bool = True
    limit: int = 20
    offset: int = 0

    def with_keyword(self, keyword: str) -> "SearchCriteria":
        self.keyword = keyword
        return self

    def with_city(self, city: str) -> "SearchCriteria":
        self.city = city
        return self

    def with_district(self, district: str) -> "SearchCriteria":
        self.district = district
        return self

    def with_cuisine_type(self, cuisine: CuisineType) -> "SearchCriteria":
        self.cuisine_type = cuisine
        return self

    def add_cuisine_type(self, cuisine: CuisineType) -> "SearchCriteria":
        if cuisine is not None:
            self.cuisine_types.add(cuisine)
        return self

    def with_rating_range(self, min_rating: Optional[float], max_rating: Optional[float] = None) -> "SearchCriteria":
        self.min_rating = min_rating
        self.max_rating = max_rating
        return self

    def with_price_range(self, min_price: Optional[float], max_price: Optional[float] = None) -> "SearchCriteria":
        self.min_price = min_price
        self.max_price = max_price
        return self

    def with_price_level(self, level: int) -> "SearchCriteria":
        self.price_level = level
        return self

    def with_open_now(self, open_now: bool = True) -> "SearchCriteria":
        self.open_now = open_now
        return self

    def with_delivery(self, value: bool = True) -> "SearchCriteria":
        self.has_delivery = value
        return self

    def with_takeout(self, value: bool = True) -> "SearchCriteria":
        self.has_takeout = value
        return self

    def with_parking(self, value: bool = True) -> "SearchCriteria":
        self.has_parking = value
        return self

    def with_reservations(self, value: bool = True) -> "SearchCriteria":
        self.accepts_reservations = value
        return self

    def near_location(self, latitude: float, longitude: float, radius_km: float) -> "SearchCriteria":
        self.latitude = latitude
        self.longitude = longitude
        self.radius_km = radius_km
        return self

    def with_sort(self, sort_by: SortType, ascending: bool = True) -> "SearchCriteria":
        self.sort_by = sort_by
        self.ascending = ascending
        return self

    def with_limit(self, limit: int) -> "SearchCriteria":
        self.limit = limit
        return self

    def with_offset(self, offset: int) -> "SearchCriteria":
        self.offset = offset
        return self

    def has_location_filter(self) -> bool:
        return (self.latitude is not None and self.longitude is not None
                and self.radius_km is not None and self.radius_km > 0)

    def has_price_filter(self) -> bool:
        return self.min_price is not None or self.max_price is not None or self.price_level is not None

    def has_rating_filter(self) -> bool:
        return self.min_rating is not None or self.max_rating is not None

    def is_empty(self) -> bool:
        return (not (self.keyword and self.keyword.strip())
                and not self.city and not self.district
                and self.cuisine_type is None and not self.cuisine_types
                and not self.has_rating_filter() and not self.has_price_filter()
                and not self.open_now
                and self.has_delivery is None and self.has_takeout is None
                and self.has_parking is None and self.accepts_reservations is None
                and not self.has_location_filter())


@dataclass
class UserPreferences:
    """Diner preference profile used for match scoring"""
    user_id: Optional[str] = None
    favorite_cuisines: Set[CuisineType] = field(default_factory=set)
    disliked_cuisines: Set[CuisineType] = field(default_factory=set)
    max_price_level: int = 4
    min_acceptable_rating: float = 0.0
    prefer_vegetarian: bool = False
    prefer_vegan: bool = False
    prefer_gluten_free: bool = False
    requires_parking: bool = False
    prefer_delivery: bool = False
    prefer_takeout: bool = False
    max_distance_km: float = 10.0
    user_location: Optional[Location] = None

    def __post_init__(self):
        self.disliked_cuisines -= self.favorite_cuisines

    def __setattr__(self, name, value):
        # Clamp on every assignment, including the dataclass __init__
        if name == 'max_price_level':
            value = max(1, min(4, value))
        elif name == 'min_acceptable_rating':
            value = max(0.0, min(5.0, value))
        super().__setattr__(name, value)

    def set_max_price_level(self, level: int) -> None:
        self.max_price_level = level

    def set_min_acceptable_rating(self, rating: float) -> None:
        self.min_acceptable_rating = rating

    def add_favorite_cuisine(self, cuisine: Optional[CuisineType]) -> None:
        if cuisine is None:
            return
        self.favorite_cuisines.add(cuisine)
        self.disliked_cuisines.discard(cuisine)

    def add_disliked_cuisine(self, cuisine: Optional[CuisineType]) -> None:
        if cuisine is None:
            return
        self.disliked_cuisines.add(cuisine)
        self.favorite_cuisines.discard(cuisine)

    def set_favorite_cuisines(self, cuisines) -> None:
        self.favorite_cuisines = set(cuisines or [])
        self.disliked_cuisines -= self.favorite_cuisines

    def set_disliked_cuisines(self, cuisines) -> None:
        self.disliked_cuisines = set(cuisines or [])
        self.favorite_cuisines -= self.disliked_cuisines

    def likes_cuisine(self, cuisine: Optional[CuisineType]) -> bool:
        return cuisine is not None and cuisine in self.favorite_cuisines

    def dislikes_cuisine(self, cuisine: Optional[CuisineType]) -> bool:
        return cuisine is not None and cuisine in self.disliked_cuisines


@dataclass
class PriceStatistics:
    """Summary of effective prices across a restaurant set"""
    count: int = 0
    min_price: float = 0.0
    max_price: float = 0.0
    average_price: float = 0.0
    median_price: float = 0.0
