"""
data_processor.py
Data processing and CSV import functionality
"""

import re
import logging
from datetime import datetime, time, timedelta
from typing import List, Optional

import pandas as pd

from models import BusinessHours, CuisineType, Location, Restaurant, Review
from catalog import RestaurantCatalog
from config import config

logger = logging.getLogger(__name__)

SEED_REVIEW_COMMENT = "很棒的用餐體驗！"
TRUE_VALUES = {'true', 'yes', 'y', '1', 't'}


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and pd.isna(value):
        return True
    text = str(value).strip()
    return not text or text.lower() == 'nan' or text == '-'


class DataProcessor:
    """Handles data cleaning and standardization"""

    @staticmethod
    def parse_cuisine_type(cuisine_input) -> CuisineType:
        """Member name ("HOT_POT") or display name ("火鍋"); OTHER when unknown"""
        if _is_missing(cuisine_input):
            return CuisineType.OTHER
        return CuisineType.from_value(str(cuisine_input))

    @staticmethod
    def parse_additional_cuisines(cuisine_input) -> List[CuisineType]:
        if _is_missing(cuisine_input):
            return []
        parts = re.split(r'[,;/]', str(cuisine_input))
        return [CuisineType.from_value(p) for p in parts if p.strip()]

    @staticmethod
    def parse_price_level(level_input) -> int:
        """Numeric 0-4 or a run of '$' signs; 0 when unknown"""
        if _is_missing(level_input):
            return 0

        level_str = str(level_input).strip()
        dollar_count = level_str.count('$')
        if dollar_count > 0:
            return min(dollar_count, 4)  # Cap at 4

        try:
            level = int(float(level_str))
        except ValueError:
            return 0
        return level if 0 <= level <= 4 else 0

    @staticmethod
    def parse_price(price_input) -> float:
        if _is_missing(price_input):
            return 0.0
        try:
            return max(0.0, float(str(price_input).replace(',', '').replace('$', '')))
        except ValueError:
            return 0.0

    @staticmethod
    def parse_bool(flag_input) -> bool:
        if _is_missing(flag_input):
            return False
        if isinstance(flag_input, bool):
            return flag_input
        return str(flag_input).strip().lower() in TRUE_VALUES

    @staticmethod
    def parse_time(time_input) -> Optional[time]:
        """Parse "HH:MM" (24-hour) into a time"""
        if _is_missing(time_input):
            return None
        match = re.fullmatch(r'(\d{1,2}):(\d{2})', str(time_input).strip())
        if not match:
            return None
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            return None
        return time(hour, minute)

    @staticmethod
    def parse_ratings(ratings_input) -> List[int]:
        """Comma-separated star ratings; entries outside 1-5 are dropped"""
        if _is_missing(ratings_input):
            return []

        ratings = []
        for part in re.split(r'[,;\s]+', str(ratings_input)):
            if not part:
                continue
            try:
                rating = int(float(part))
            except ValueError:
                continue
            if 1 <= rating <= 5:
                ratings.append(rating)
        return ratings

    @staticmethod
    def build_daily_hours(open_time: Optional[time], close_time: Optional[time],
                          closed_on_holidays: bool = False) -> Optional[BusinessHours]:
        """Same slot every day of the week"""
        if open_time is None or close_time is None:
            return None
        hours = BusinessHours(closed_on_holidays=closed_on_holidays)
        for day in range(7):
            hours.set_hours(day, open_time, close_time)
        return hours

    @staticmethod
    def build_seed_reviews(restaurant_id: str, ratings: List[int],
                           now: Optional[datetime] = None) -> List[Review]:
        """One review per rating, the last one dated yesterday and earlier ones a day apart"""
        now = now or datetime.now()
        return [
            Review(
                id=f"review_{restaurant_id}_{i}",
                restaurant_id=restaurant_id,
                rating=rating,
                comment=SEED_REVIEW_COMMENT,
                created_at=now - timedelta(days=len(ratings) - i),
            )
            for i, rating in enumerate(ratings)
        ]


class CatalogImporter:
    """Handles importing restaurant data from CSV files"""

    REQUIRED_COLUMNS = ['id', 'name']

    def __init__(self, catalog: RestaurantCatalog):
        self.catalog = catalog
        self.data_processor = DataProcessor()

    def import_from_csv(self, csv_path: str) -> List[Restaurant]:
        """Import restaurants from CSV file into the catalog"""
        df = pd.read_csv(csv_path, dtype=str)
        logger.info(f"Loaded {len(df)} rows from {csv_path}")

        # Clean column names
        df.columns = df.columns.str.strip()

        missing = [col for col in self.REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise ValueError(f"CSV is missing required columns: {', '.join(missing)}")

        restaurants = []
        now = datetime.now()
        for index, row in df.iterrows():
            try:
                restaurant = self._row_to_restaurant(row, now)
            except ValueError as e:
                logger.warning(f"Failed to process row {index}: {e}")
                continue
            if restaurant:
                self.catalog.save(restaurant)
                restaurants.append(restaurant)

        logger.info(f"Successfully imported {len(restaurants)} restaurants")
        return restaurants

    def _row_to_restaurant(self, row: pd.Series, now: datetime) -> Optional[Restaurant]:
        """Convert CSV row to Restaurant object"""
        # Helper function to safely get string values from pandas row
        def safe_get(column_name, default=''):
            value = row.get(column_name, default)
            if _is_missing(value):
                return default
            return str(value).strip()

        restaurant_id = safe_get('id')
        name = safe_get('name')
        if not restaurant_id or not name:
            logger.warning("Skipping row without id or name")
            return None

        location = None
        if safe_get('latitude') and safe_get('longitude'):
            location = Location(
                latitude=float(safe_get('latitude')),
                longitude=float(safe_get('longitude')),
                address=safe_get('address') or None,
                city=safe_get('city') or None,
                district=safe_get('district') or None,
                postal_code=safe_get('postal_code') or None,
            )

        restaurant = Restaurant(
            id=restaurant_id,
            name=name,
            cuisine_type=self.data_processor.parse_cuisine_type(row.get('cuisine')),
            location=location,
            description=safe_get('description') or None,
            average_price=self.data_processor.parse_price(row.get('average_price')),
            price_level=self.data_processor.parse_price_level(row.get('price_level')),
            phone_number=safe_get('phone') or None,
            website=safe_get('website') or None,
            has_delivery=self.data_processor.parse_bool(row.get('has_delivery')),
            has_takeout=self.data_processor.parse_bool(row.get('has_takeout')),
            has_parking=self.data_processor.parse_bool(row.get('has_parking')),
            accepts_reservations=self.data_processor.parse_bool(row.get('accepts_reservations')),
        )

        for cuisine in self.data_processor.parse_additional_cuisines(row.get('additional_cuisines')):
            if cuisine != restaurant.cuisine_type:
                restaurant.add_cuisine_type(cuisine)

        restaurant.business_hours = self.data_processor.build_daily_hours(
            self.data_processor.parse_time(row.get('open_time')),
            self.data_processor.parse_time(row.get('close_time')),
            self.data_processor.parse_bool(row.get('closed_on_holidays')),
        )

        ratings = self.data_processor.parse_ratings(row.get('ratings'))
        for review in self.data_processor.build_seed_reviews(restaurant_id, ratings, now):
            restaurant.add_review(review)

        return restaurant


def load_sample_data(catalog: RestaurantCatalog, csv_path: Optional[str] = None) -> List[Restaurant]:
    """Seed the catalog with the bundled Taichung restaurants"""
    path = csv_path or config.get_sample_data_path()
    restaurants = CatalogImporter(catalog).import_from_csv(path)
    logger.info(f"Sample catalog ready with {catalog.count()} restaurants")
    return restaurants
