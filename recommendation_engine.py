"""
recommendation_engine.py
Preference matching, similarity, popularity and proximity ranking
"""

import math
import logging
from dataclasses import dataclass
from typing import List, Optional

from models import Restaurant, Location, UserPreferences
from rating_engine import RatingEngine
from price_analyzer import PriceAnalyzer
from geo import distance_between

logger = logging.getLogger(__name__)

DEFAULT_POPULAR_LIMIT = 10
DEFAULT_TOP_PICKS_LIMIT = 5
DEFAULT_NEARBY_RADIUS_KM = 5.0
MAX_SIMILAR_RESULTS = 10
MIN_SIMILARITY = 0.2

# Bayesian prior for popularity: platform average rating and its pseudo-count
PRIOR_RATING = 3.5
PRIOR_REVIEWS = 5

# Similarity dimension weights
CUISINE_WEIGHT = 30
PRICE_WEIGHT = 20
RATING_WEIGHT = 20
CITY_WEIGHT = 15
FEATURE_WEIGHT = 15


@dataclass
class ScoredRestaurant:
    """Restaurant paired with a ranking score"""
    restaurant: Restaurant
    score: float
    distance_km: Optional[float] = None


class RecommendationEngine:
    """Core recommendation engine"""

    def __init__(self, rating_engine: Optional[RatingEngine] = None,
                 price_analyzer: Optional[PriceAnalyzer] = None):
        self.rating_engine = rating_engine or RatingEngine()
        self.price_analyzer = price_analyzer or PriceAnalyzer(self.rating_engine)

    # Preference matching

    def recommend_by_preferences(self, preferences: Optional[UserPreferences],
                                 restaurants: List[Restaurant]) -> List[Restaurant]:
        """Every active restaurant ordered by match score; popular picks when no preferences"""
        if not restaurants:
            return []
        if preferences is None:
            return self.popular_restaurants(restaurants, DEFAULT_POPULAR_LIMIT)

        scored = [
            ScoredRestaurant(r, self.match_score(r, preferences))
            for r in restaurants if r is not None and r.active
        ]
        scored.sort(key=lambda s: s.score, reverse=True)

        logger.info(f"Ranked {len(scored)} restaurants for preferences of {preferences.user_id or 'anonymous'}")
        return [s.restaurant for s in scored]

    def match_score(self, restaurant: Restaurant, preferences: UserPreferences) -> float:
        """Additive score from a base of 50, floored at 0"""
        if restaurant is None or preferences is None:
            return 0.0

        score = 50.0

        # Cuisine
        if restaurant.cuisine_type is not None:
            if preferences.likes_cuisine(restaurant.cuisine_type):
                score += 25
            elif preferences.dislikes_cuisine(restaurant.cuisine_type):
                score -= 40

        for cuisine in restaurant.additional_cuisine_types:
            if preferences.likes_cuisine(cuisine):
                score += 10
            elif preferences.dislikes_cuisine(cuisine):
                score -= 15

        # Price
        price_level = self.price_analyzer.categorize_price_level(restaurant)
        if price_level > 0:
            score += 10 if price_level <= preferences.max_price_level else -25

        # Rating
        rating = self.rating_engine.average_rating(restaurant)
        if rating >= preferences.min_acceptable_rating:
            score += rating * 5
        elif rating > 0:
            score -= 20

        # Features
        if preferences.requires_parking:
            score += 15 if restaurant.has_parking else -25
        if preferences.prefer_delivery and restaurant.has_delivery:
            score += 10
        if preferences.prefer_takeout and restaurant.has_takeout:
            score += 10

        # Distance
        if (preferences.user_location is not None and restaurant.location is not None
                and preferences.max_distance_km > 0):
            distance = self.distance(preferences.user_location, restaurant.location)
            if distance <= preferences.max_distance_km:
                score += 15 - (distance / preferences.max_distance_km * 10)
            else:
                score -= 20

        return max(0.0, score)

    # Similarity

    def similarity(self, first: Restaurant, second: Restaurant) -> float:
        """
        Normalized [0, 1] likeness across cuisine, price, rating, city and features.

        Dimensions without comparable data on both sides are left out of
        both the earned score and the attainable maximum.
        The price term is floored at 0, so levels three apart earn nothing
        rather than a negative score.
        """
        if first is None or second is None:
            return 0.0

        score = 0.0
        attainable = 0.0

        if first.cuisine_type is not None and second.cuisine_type is not None:
            attainable += CUISINE_WEIGHT
            if first.cuisine_type == second.cuisine_type:
                score += CUISINE_WEIGHT
            elif (second.has_cuisine_type(first.cuisine_type)
                  or first.has_cuisine_type(second.cuisine_type)):
                score += CUISINE_WEIGHT / 2

        level1 = self.price_analyzer.categorize_price_level(first)
        level2 = self.price_analyzer.categorize_price_level(second)
        if level1 > 0 and level2 > 0:
            attainable += PRICE_WEIGHT
            score += max(0, PRICE_WEIGHT - abs(level1 - level2) * 7)

        rating1 = self.rating_engine.average_rating(first)
        rating2 = self.rating_engine.average_rating(second)
        if rating1 > 0 and rating2 > 0:
            attainable += RATING_WEIGHT
            score += max(0.0, RATING_WEIGHT - abs(rating1 - rating2) * 5)

        city1 = first.location.city if first.location else None
        city2 = second.location.city if second.location else None
        if city1 and city2:
            attainable += CITY_WEIGHT
            if city1 == city2:
                score += CITY_WEIGHT

        attainable += FEATURE_WEIGHT
        agreements = sum([
            first.has_delivery == second.has_delivery,
            first.has_takeout == second.has_takeout,
            first.has_parking == second.has_parking,
        ])
        score += agreements * 5

        return score / attainable if attainable > 0 else 0.0

    def recommend_similar(self, reference: Optional[Restaurant],
                          candidates: List[Restaurant]) -> List[Restaurant]:
        if reference is None or not candidates:
            return []

        scored = []
        for candidate in candidates:
            if candidate is None or not candidate.active:
                continue
            if candidate.id == reference.id:
                continue
            similarity = self.similarity(reference, candidate)
            if similarity > MIN_SIMILARITY:
                scored.append(ScoredRestaurant(candidate, similarity))

        scored.sort(key=lambda s: s.score, reverse=True)
        return [s.restaurant for s in scored[:MAX_SIMILAR_RESULTS]]

    # Popularity

    def popularity_score(self, restaurant: Optional[Restaurant]) -> float:
        """Bayesian-smoothed rating x 20 plus a log-scaled review count term"""
        if restaurant is None:
            return 0.0

        rating = self.rating_engine.average_rating(restaurant)
        count = restaurant.review_count
        smoothed = (count * rating + PRIOR_REVIEWS * PRIOR_RATING) / (count + PRIOR_REVIEWS)
        return smoothed * 20 + math.log10(count + 1) * 10

    def popular_restaurants(self, restaurants: List[Restaurant],
                            limit: int = DEFAULT_POPULAR_LIMIT) -> List[Restaurant]:
        if limit <= 0:
            limit = DEFAULT_POPULAR_LIMIT

        reviewed = [r for r in restaurants or [] if r is not None and r.active and r.review_count > 0]
        reviewed.sort(key=self.popularity_score, reverse=True)
        return reviewed[:limit]

    # Proximity

    def distance(self, origin: Optional[Location], destination: Optional[Location]) -> float:
        return distance_between(origin, destination)

    def find_nearby(self, origin: Optional[Location], restaurants: List[Restaurant],
                    radius_km: float = DEFAULT_NEARBY_RADIUS_KM) -> List[Restaurant]:
        """Active restaurants within radius_km, nearest first"""
        if origin is None or not restaurants:
            return []
        if radius_km <= 0:
            radius_km = DEFAULT_NEARBY_RADIUS_KM

        nearby = []
        for restaurant in restaurants:
            if restaurant is None or not restaurant.active or restaurant.location is None:
                continue
            distance = self.distance(origin, restaurant.location)
            if distance <= radius_km:
                nearby.append(ScoredRestaurant(restaurant, score=distance, distance_km=distance))

        nearby.sort(key=lambda s: s.distance_km)
        logger.debug(f"{len(nearby)} restaurants within {radius_km} km")
        return [s.restaurant for s in nearby]

    def sort_by_distance(self, origin: Optional[Location], restaurants: List[Restaurant]) -> List[Restaurant]:
        """Restaurants with a location, nearest first"""
        if origin is None or restaurants is None:
            return []
        located = [r for r in restaurants if r is not None and r.location is not None]
        return sorted(located, key=lambda r: self.distance(origin, r.location))

    def top_picks(self, restaurants: List[Restaurant], origin: Optional[Location] = None,
                  limit: int = DEFAULT_TOP_PICKS_LIMIT) -> List[Restaurant]:
        """Blend of rating, review volume and walking distance"""
        if not restaurants:
            return []
        if limit <= 0:
            limit = DEFAULT_TOP_PICKS_LIMIT

        scored = []
        for restaurant in restaurants:
            if restaurant is None or not restaurant.active:
                continue

            score = self.rating_engine.average_rating(restaurant) * 10
            score += min(20.0, math.log10(restaurant.review_count + 1) * 10)

            if origin is not None and restaurant.location is not None:
                distance = self.distance(origin, restaurant.location)
                if distance <= 1:
                    score += 30
                elif distance <= 3:
                    score += 20
                elif distance <= 5:
                    score += 10

            scored.append(ScoredRestaurant(restaurant, score))

        scored.sort(key=lambda s: s.score, reverse=True)
        return [s.restaurant for s in scored[:limit]]
