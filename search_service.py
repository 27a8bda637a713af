"""
search_service.py
Multi-criteria restaurant search over the catalog
"""

import math
import logging
from typing import Callable, Iterable, List, Optional

import Levenshtein

from models import CuisineType, Location, Restaurant, SearchCriteria, SortType
from catalog import RestaurantCatalog
from rating_engine import RatingEngine
from price_analyzer import PriceAnalyzer
from business_hours import BusinessHoursEngine
from recommendation_engine import RecommendationEngine
from geo import UNKNOWN_DISTANCE

logger = logging.getLogger(__name__)

FUZZY_SIMILARITY_THRESHOLD = 0.6


def name_similarity(first: Optional[str], second: Optional[str]) -> float:
    """1 - edit distance / longer length, in [0, 1]"""
    if first is None or second is None:
        return 0.0
    if first == second:
        return 1.0
    return 1.0 - Levenshtein.distance(first, second) / max(len(first), len(second))


def _contains(value: Optional[str], needle: str) -> bool:
    return value is not None and needle in value.lower()


class RestaurantSearchService:
    """Search, filter, sort and paginate restaurants from a catalog"""

    def __init__(self, catalog: RestaurantCatalog,
                 rating_engine: Optional[RatingEngine] = None,
                 price_analyzer: Optional[PriceAnalyzer] = None,
                 business_hours: Optional[BusinessHoursEngine] = None,
                 recommendation_engine: Optional[RecommendationEngine] = None):
        self.catalog = catalog
        self.rating_engine = rating_engine or RatingEngine()
        self.price_analyzer = price_analyzer or PriceAnalyzer(self.rating_engine)
        self.business_hours = business_hours or BusinessHoursEngine()
        self.recommendation_engine = recommendation_engine or RecommendationEngine(
            self.rating_engine, self.price_analyzer
        )

    def all_restaurants(self) -> List[Restaurant]:
        """Active restaurants only"""
        return [r for r in self.catalog.find_all() if r is not None and r.active]

    def count_restaurants(self) -> int:
        return len(self.all_restaurants())

    # Single-attribute searches

    def search_by_name(self, name: Optional[str]) -> List[Restaurant]:
        """Exact name match, ignoring case"""
        if name is None or not name.strip():
            return []
        target = name.strip().lower()
        return [r for r in self.all_restaurants() if r.name and r.name.lower() == target]

    def search_by_name_fuzzy(self, keyword: Optional[str]) -> List[Restaurant]:
        """
        Names containing the keyword or within edit-distance similarity 0.6.

        Names starting with the keyword come first; each group is ordered
        alphabetically ignoring case.
        """
        if keyword is None or not keyword.strip():
            return []
        needle = keyword.strip().lower()

        matches = []
        for restaurant in self.all_restaurants():
            if not restaurant.name:
                continue
            name = restaurant.name.lower()
            if (needle in name or name.startswith(needle)
                    or name_similarity(name, needle) > FUZZY_SIMILARITY_THRESHOLD):
                matches.append(restaurant)

        matches.sort(key=lambda r: (not r.name.lower().startswith(needle), r.name.lower()))
        logger.debug(f"Fuzzy search '{keyword}' matched {len(matches)} restaurants")
        return matches

    def search_by_city(self, city: Optional[str]) -> List[Restaurant]:
        if city is None or not city.strip():
            return []
        needle = city.strip().lower()
        return [r for r in self.all_restaurants() if r.location and _contains(r.location.city, needle)]

    def search_by_district(self, district: Optional[str]) -> List[Restaurant]:
        if district is None or not district.strip():
            return []
        needle = district.strip().lower()
        return [r for r in self.all_restaurants() if r.location and _contains(r.location.district, needle)]

    def search_by_cuisine_type(self, cuisine: Optional[CuisineType]) -> List[Restaurant]:
        if cuisine is None:
            return []
        return [r for r in self.all_restaurants() if r.has_cuisine_type(cuisine)]

    def search_by_multiple_cuisine_types(self, cuisines: Optional[Iterable[CuisineType]]) -> List[Restaurant]:
        cuisines = set(cuisines or [])
        if not cuisines:
            return []
        return [r for r in self.all_restaurants() if any(r.has_cuisine_type(c) for c in cuisines)]

    def search_global(self, keyword: Optional[str]) -> List[Restaurant]:
        """Substring search across name, description, cuisine, city and address; name hits first"""
        if keyword is None or not keyword.strip():
            return []
        needle = keyword.strip().lower()

        matches = [r for r in self.all_restaurants() if self._matches_global(r, needle)]
        # sort() is stable, so ties keep catalog order
        matches.sort(key=lambda r: not _contains(r.name, needle))
        return matches

    @staticmethod
    def _matches_global(restaurant: Restaurant, needle: str) -> bool:
        if _contains(restaurant.name, needle) or _contains(restaurant.description, needle):
            return True
        if restaurant.cuisine_type is not None and _contains(restaurant.cuisine_type.display_name, needle):
            return True
        if restaurant.location is not None:
            return _contains(restaurant.location.city, needle) or _contains(restaurant.location.address, needle)
        return False

    # Criteria pipeline

    def search_by_multiple_criteria(self, criteria: Optional[SearchCriteria]) -> List[Restaurant]:
        """Filter, sort and paginate according to the criteria"""
        if criteria is None:
            return self.all_restaurants()

        results = self.all_restaurants()

        if criteria.keyword and criteria.keyword.strip():
            keyword = criteria.keyword.strip()
            results = [r for r in results if r.matches_keyword(keyword)]

        if criteria.city and criteria.city.strip():
            city = criteria.city.strip().lower()
            results = [r for r in results if r.location and _contains(r.location.city, city)]

        if criteria.district and criteria.district.strip():
            district = criteria.district.strip().lower()
            results = [r for r in results if r.location and _contains(r.location.district, district)]

        if criteria.cuisine_type is not None:
            results = [r for r in results if r.has_cuisine_type(criteria.cuisine_type)]

        if criteria.cuisine_types:
            results = [r for r in results
                       if any(r.has_cuisine_type(c) for c in criteria.cuisine_types)]

        if criteria.has_rating_filter():
            results = self.rating_engine.filter_by_rating_range(
                results, criteria.min_rating, criteria.max_rating
            )

        if criteria.has_price_filter():
            if criteria.price_level is not None:
                results = self.price_analyzer.filter_by_price_level(results, criteria.price_level)
            else:
                results = self.price_analyzer.filter_by_price_range(
                    results, criteria.min_price, criteria.max_price
                )

        if criteria.open_now:
            results = self.business_hours.find_open_now(results)

        if criteria.has_delivery:
            results = [r for r in results if r.has_delivery]
        if criteria.has_takeout:
            results = [r for r in results if r.has_takeout]
        if criteria.has_parking:
            results = [r for r in results if r.has_parking]
        if criteria.accepts_reservations:
            results = [r for r in results if r.accepts_reservations]

        if criteria.has_location_filter():
            origin = Location(criteria.latitude, criteria.longitude)
            results = self.recommendation_engine.find_nearby(origin, results, criteria.radius_km)

        logger.debug(f"{len(results)} restaurants matched before sorting and paging")
        results = self.sort_results(results, criteria)

        offset = max(0, criteria.offset)
        limit = max(0, criteria.limit)
        if offset >= len(results):
            return []
        return results[offset:offset + limit]

    def sort_results(self, results: List[Restaurant], criteria: Optional[SearchCriteria]) -> List[Restaurant]:
        """Order by the criteria's sort key; no key keeps the incoming order"""
        if not results:
            return []
        if criteria is None or criteria.sort_by is None:
            return list(results)

        key = self._sort_key(criteria)
        return sorted(results, key=key, reverse=not criteria.ascending)

    def _sort_key(self, criteria: SearchCriteria) -> Callable[[Restaurant], object]:
        sort_by = criteria.sort_by

        if sort_by == SortType.NAME:
            return lambda r: (r.name or '').lower()
        if sort_by == SortType.RATING:
            return self.rating_engine.average_rating
        if sort_by == SortType.PRICE:
            return self.price_analyzer.effective_price
        if sort_by == SortType.REVIEW_COUNT:
            return lambda r: r.review_count
        if sort_by == SortType.DISTANCE:
            if criteria.has_location_filter():
                origin = Location(criteria.latitude, criteria.longitude)
                return lambda r: (self.recommendation_engine.distance(origin, r.location)
                                  if r.location else UNKNOWN_DISTANCE)
            return lambda r: r.name or ''
        return self.relevance_score

    def relevance_score(self, restaurant: Restaurant) -> float:
        return self.rating_engine.average_rating(restaurant) * math.log10(restaurant.review_count + 1)
