"""
catalog.py
In-memory restaurant store for the Restaurant Discovery Engine
"""

import logging
from typing import Dict, List, Optional

from fuzzywuzzy import fuzz

from models import Restaurant
from exceptions import RestaurantNotFoundError

logger = logging.getLogger(__name__)

MIN_NAME_MATCH_SCORE = 40


class RestaurantCatalog:
    """Holds restaurants keyed by id"""

    def __init__(self):
        self._restaurants: Dict[str, Restaurant] = {}

    def save(self, restaurant: Restaurant) -> Restaurant:
        """Insert or replace a restaurant"""
        if restaurant is None:
            raise ValueError("Restaurant cannot be None")
        if not restaurant.id or not restaurant.id.strip():
            raise ValueError("Restaurant ID cannot be empty")

        self._restaurants[restaurant.id] = restaurant
        logger.debug(f"Saved restaurant {restaurant.id}: {restaurant.name}")
        return restaurant

    def find_by_id(self, restaurant_id: Optional[str]) -> Optional[Restaurant]:
        if restaurant_id is None:
            return None
        return self._restaurants.get(restaurant_id)

    def get_by_id(self, restaurant_id: Optional[str]) -> Restaurant:
        restaurant = self.find_by_id(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(f"Restaurant not found with id: {restaurant_id}", restaurant_id)
        return restaurant

    def find_all(self) -> List[Restaurant]:
        """Snapshot list in insertion order"""
        return list(self._restaurants.values())

    def find_by_name(self, name: Optional[str]) -> List[Restaurant]:
        """Case-insensitive substring match on the name"""
        if name is None or not name.strip():
            return []
        needle = name.lower()
        return [r for r in self._restaurants.values() if r.name and needle in r.name.lower()]

    def find_best_name_match(self, name: Optional[str],
                             min_score: int = MIN_NAME_MATCH_SCORE) -> Optional[Restaurant]:
        """Closest restaurant by fuzzy name ratio, or None below min_score"""
        if name is None or not name.strip():
            return None

        best_score = 0
        best_match = None
        for restaurant in self._restaurants.values():
            score = fuzz.ratio(name.lower(), (restaurant.name or '').lower())
            if score > best_score and score >= min_score:
                best_score = score
                best_match = restaurant

        if best_match:
            logger.info(f"Found match for '{name}': '{best_match.name}' (score: {best_score})")
        else:
            logger.warning(f"No restaurant name resembles '{name}'")
        return best_match

    def delete(self, restaurant_id: Optional[str]) -> None:
        if restaurant_id is not None:
            self._restaurants.pop(restaurant_id, None)

    def delete_all(self) -> None:
        self._restaurants.clear()

    def exists(self, restaurant_id: Optional[str]) -> bool:
        return restaurant_id is not None and restaurant_id in self._restaurants

    def count(self) -> int:
        return len(self._restaurants)
