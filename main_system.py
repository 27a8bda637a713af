"""
main_system.py
Main system orchestrator for the Restaurant Discovery Engine
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from models import Location, Restaurant, Review
from catalog import RestaurantCatalog
from rating_engine import RatingEngine
from price_analyzer import PriceAnalyzer
from business_hours import BusinessHoursEngine
from recommendation_engine import RecommendationEngine
from search_service import RestaurantSearchService
from validation import InputValidator
from data_processor import load_sample_data

logger = logging.getLogger(__name__)


class RestaurantDiscoverySystem:
    """Main system orchestrator: one catalog shared by every engine"""

    def __init__(self, catalog: Optional[RestaurantCatalog] = None, load_sample: bool = True,
                 holidays: Optional[Iterable] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.catalog = catalog if catalog is not None else RestaurantCatalog()
        self.validator = InputValidator()
        self.rating_engine = RatingEngine()
        self.price_analyzer = PriceAnalyzer(self.rating_engine)
        self.business_hours = BusinessHoursEngine(holidays, clock)
        self.recommendation_engine = RecommendationEngine(self.rating_engine, self.price_analyzer)
        self.search_service = RestaurantSearchService(
            self.catalog,
            rating_engine=self.rating_engine,
            price_analyzer=self.price_analyzer,
            business_hours=self.business_hours,
            recommendation_engine=self.recommendation_engine,
        )

        if load_sample and self.catalog.count() == 0:
            load_sample_data(self.catalog)

        logger.info(f"Restaurant Discovery System initialized with {self.catalog.count()} restaurants")

    def active_restaurants(self) -> List[Restaurant]:
        return self.search_service.all_restaurants()

    def add_restaurant(self, restaurant: Restaurant) -> Restaurant:
        self.validator.validate_restaurant(restaurant)
        return self.catalog.save(restaurant)

    def add_review(self, review: Review) -> Restaurant:
        """Validate and attach a review to its restaurant"""
        self.validator.validate_review(review)
        restaurant = self.catalog.get_by_id(review.restaurant_id)
        restaurant.add_review(review)
        logger.info(f"Added review {review.id} to {restaurant.name}")
        return restaurant

    def resolve_restaurant(self, id_or_name: str) -> Optional[Restaurant]:
        """Look up by id first, then by closest name"""
        restaurant = self.catalog.find_by_id(id_or_name)
        if restaurant is None:
            restaurant = self.catalog.find_best_name_match(id_or_name)
        return restaurant

    def format_restaurant(self, restaurant: Restaurant,
                          origin: Optional[Location] = None) -> Dict[str, Any]:
        """Flatten a restaurant into a summary dictionary"""
        location = restaurant.location
        summary = {
            'id': restaurant.id,
            'name': restaurant.name,
            'cuisine': restaurant.cuisine_type.display_name if restaurant.cuisine_type else None,
            'city': location.city if location else None,
            'district': location.district if location else None,
            'address': location.address if location else None,
            'rating': self.rating_engine.average_rating(restaurant),
            'review_count': restaurant.review_count,
            'price_level': self.price_analyzer.categorize_price_level(restaurant),
            'price_range': self.price_analyzer.price_range_description(restaurant),
            'open_now': self.business_hours.is_open_now(restaurant),
        }
        if origin is not None and location is not None:
            summary['distance_km'] = round(self.recommendation_engine.distance(origin, location), 2)
        return summary

    def restaurant_details(self, restaurant: Restaurant) -> Dict[str, Any]:
        details = self.format_restaurant(restaurant)
        next_open = self.business_hours.next_open_time(restaurant)
        details.update({
            'description': restaurant.description,
            'weighted_rating': self.rating_engine.weighted_rating(restaurant),
            'rating_distribution': self.rating_engine.rating_distribution(restaurant),
            'rating_trend': self.rating_engine.rating_trend(restaurant).value,
            'effective_price': self.price_analyzer.effective_price(restaurant),
            'hours_summary': self.business_hours.business_hours_summary(restaurant),
            'weekly_hours': self.business_hours.weekly_operating_hours(restaurant),
            'next_open': next_open.isoformat(timespec='minutes') if next_open else None,
            'popularity': round(self.recommendation_engine.popularity_score(restaurant), 1),
            'has_delivery': restaurant.has_delivery,
            'has_takeout': restaurant.has_takeout,
            'has_parking': restaurant.has_parking,
        })
        return details
