"""
api.py
API interface for the Restaurant Discovery Engine
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from main_system import RestaurantDiscoverySystem
from models import CuisineType, Location, Restaurant, Review, SearchCriteria, SortType, UserPreferences
from exceptions import RestaurantNotFoundError, ValidationError
from config import config

logger = logging.getLogger(__name__)


class RestaurantDiscoveryAPI:
    """Dictionary-returning wrapper around the discovery system"""

    def __init__(self, system: Optional[RestaurantDiscoverySystem] = None, load_sample: bool = True):
        """Initialize the API with the discovery system"""
        self.system = system or RestaurantDiscoverySystem(load_sample=load_sample)
        logger.info("Restaurant Discovery API initialized")

    def _summaries(self, restaurants: List[Restaurant],
                   origin: Optional[Location] = None) -> List[Dict[str, Any]]:
        return [self.system.format_restaurant(r, origin) for r in restaurants]

    def search(self, keyword: str = None, city: str = None, district: str = None,
               cuisine: str = None, cuisines: Iterable[str] = None,
               min_rating: float = None, max_rating: float = None,
               min_price: float = None, max_price: float = None, price_level: int = None,
               open_now: bool = False, delivery: bool = False, takeout: bool = False,
               parking: bool = False, reservations: bool = False,
               latitude: float = None, longitude: float = None, radius_km: float = None,
               sort_by: str = None, descending: bool = False,
               limit: int = None, offset: int = 0) -> Dict[str, Any]:
        """Multi-criteria search"""
        try:
            criteria = SearchCriteria(limit=limit or config.default_limit, offset=offset)
            if keyword:
                criteria.with_keyword(keyword)
            if city:
                criteria.with_city(city)
            if district:
                criteria.with_district(district)
            if cuisine:
                criteria.with_cuisine_type(CuisineType.from_value(cuisine))
            for name in cuisines or []:
                criteria.add_cuisine_type(CuisineType.from_value(name))
            if min_rating is not None or max_rating is not None:
                criteria.with_rating_range(min_rating, max_rating)
            if min_price is not None or max_price is not None:
                criteria.with_price_range(min_price, max_price)
            if price_level is not None:
                criteria.with_price_level(price_level)
            if open_now:
                criteria.with_open_now()
            if delivery:
                criteria.with_delivery()
            if takeout:
                criteria.with_takeout()
            if parking:
                criteria.with_parking()
            if reservations:
                criteria.with_reservations()

            origin = None
            if latitude is not None and longitude is not None:
                criteria.near_location(latitude, longitude, radius_km or config.default_radius_km)
                origin = Location(latitude, longitude)
            if sort_by:
                criteria.with_sort(SortType.from_display_name(sort_by), ascending=not descending)

            self.system.validator.validate_search_criteria(criteria)
            results = self.system.search_service.search_by_multiple_criteria(criteria)

            logger.info(f"Search returned {len(results)} restaurants")
            return {"success": True, "count": len(results), "restaurants": self._summaries(results, origin)}

        except ValidationError as e:
            logger.error(f"Invalid search: {e.message} ({e.field})")
            return {"success": False, **e.to_dict()}
        except Exception as e:
            error_msg = f"Error searching restaurants: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def fuzzy_search(self, keyword: str) -> Dict[str, Any]:
        """Typo-tolerant name search"""
        try:
            results = self.system.search_service.search_by_name_fuzzy(keyword)
            return {"success": True, "count": len(results), "restaurants": self._summaries(results)}
        except Exception as e:
            error_msg = f"Error in fuzzy search: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def global_search(self, keyword: str) -> Dict[str, Any]:
        """Keyword search across every text field"""
        try:
            results = self.system.search_service.search_global(keyword)
            return {"success": True, "count": len(results), "restaurants": self._summaries(results)}
        except Exception as e:
            error_msg = f"Error in global search: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def recommend(self, preferences: Optional[UserPreferences], limit: int = 10) -> Dict[str, Any]:
        """Preference-ranked recommendations"""
        try:
            engine = self.system.recommendation_engine
            results = engine.recommend_by_preferences(preferences, self.system.active_restaurants())
            origin = preferences.user_location if preferences else None

            recommendations = []
            for restaurant in results[:limit]:
                summary = self.system.format_restaurant(restaurant, origin)
                if preferences is not None:
                    summary['match_score'] = round(engine.match_score(restaurant, preferences), 1)
                recommendations.append(summary)

            return {"success": True, "count": len(recommendations), "recommendations": recommendations}
        except Exception as e:
            error_msg = f"Error getting recommendations: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def similar(self, restaurant_ref: str) -> Dict[str, Any]:
        """Restaurants similar to one given by id or name"""
        try:
            reference = self.system.resolve_restaurant(restaurant_ref)
            if reference is None:
                return {"success": False, "error": f"Restaurant not found: {restaurant_ref}"}

            engine = self.system.recommendation_engine
            results = engine.recommend_similar(reference, self.system.catalog.find_all())
            similar = []
            for restaurant in results:
                summary = self.system.format_restaurant(restaurant)
                summary['similarity'] = round(engine.similarity(reference, restaurant), 3)
                similar.append(summary)

            return {"success": True, "reference": reference.name, "count": len(similar), "restaurants": similar}
        except Exception as e:
            error_msg = f"Error finding similar restaurants: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def popular(self, limit: int = 10) -> Dict[str, Any]:
        try:
            engine = self.system.recommendation_engine
            results = engine.popular_restaurants(self.system.catalog.find_all(), limit)
            restaurants = []
            for restaurant in results:
                summary = self.system.format_restaurant(restaurant)
                summary['popularity'] = round(engine.popularity_score(restaurant), 1)
                restaurants.append(summary)
            return {"success": True, "count": len(restaurants), "restaurants": restaurants}
        except Exception as e:
            error_msg = f"Error getting popular restaurants: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def top_picks(self, latitude: float = None, longitude: float = None, limit: int = 5) -> Dict[str, Any]:
        try:
            origin = Location(latitude, longitude) if latitude is not None and longitude is not None else None
            results = self.system.recommendation_engine.top_picks(
                self.system.active_restaurants(), origin, limit
            )
            return {"success": True, "count": len(results), "restaurants": self._summaries(results, origin)}
        except Exception as e:
            error_msg = f"Error getting top picks: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def budget(self, budget: float) -> Dict[str, Any]:
        """Best-value restaurants for a per-person budget"""
        try:
            analyzer = self.system.price_analyzer
            results = analyzer.recommend_by_budget(self.system.active_restaurants(), budget)
            restaurants = []
            for restaurant in results:
                summary = self.system.format_restaurant(restaurant)
                summary['effective_price'] = analyzer.effective_price(restaurant)
                restaurants.append(summary)
            return {"success": True, "budget": budget, "count": len(restaurants), "restaurants": restaurants}
        except Exception as e:
            error_msg = f"Error matching budget: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def restaurant_details(self, restaurant_ref: str) -> Dict[str, Any]:
        try:
            restaurant = self.system.resolve_restaurant(restaurant_ref)
            if restaurant is None:
                return {"success": False, "error": f"Restaurant not found: {restaurant_ref}"}
            return {"success": True, "restaurant": self.system.restaurant_details(restaurant)}
        except Exception as e:
            error_msg = f"Error getting restaurant details: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def price_stats(self) -> Dict[str, Any]:
        try:
            stats = self.system.price_analyzer.price_statistics(self.system.active_restaurants())
            return {
                "success": True,
                "stats": {
                    'count': stats.count,
                    'min': stats.min_price,
                    'max': stats.max_price,
                    'average': round(stats.average_price, 2),
                    'median': stats.median_price,
                }
            }
        except Exception as e:
            error_msg = f"Error computing price statistics: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}

    def add_review(self, restaurant_id: str, rating: int, comment: str = None,
                   user_name: str = None, user_level: int = 1, verified: bool = False) -> Dict[str, Any]:
        """Validate and record a review"""
        try:
            review = Review(
                id=str(uuid.uuid4()),
                restaurant_id=restaurant_id,
                rating=rating,
                comment=comment,
                user_name=user_name,
                user_level=user_level,
                verified=verified,
            )
            restaurant = self.system.add_review(review)
            return {
                "success": True,
                "review_id": review.id,
                "restaurant": restaurant.name,
                "rating": self.system.rating_engine.average_rating(restaurant),
            }
        except ValidationError as e:
            logger.error(f"Rejected review: {e.message} ({e.field})")
            return {"success": False, **e.to_dict()}
        except RestaurantNotFoundError as e:
            logger.error(e.message)
            return {"success": False, "error": e.message, "restaurant_id": e.restaurant_id}

    def system_status(self) -> Dict[str, Any]:
        try:
            return {
                "success": True,
                "restaurants": self.system.catalog.count(),
                "active_restaurants": self.system.search_service.count_restaurants(),
                "open_now": len(self.system.business_hours.find_open_now(self.system.active_restaurants())),
                "holidays": len(self.system.business_hours.holidays),
                "config": config.describe(),
            }
        except Exception as e:
            error_msg = f"Error getting system stats: {str(e)}"
            logger.error(error_msg)
            return {"success": False, "error": error_msg}
