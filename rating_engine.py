"""
rating_engine.py
Rating aggregation, credibility weighting and trend detection
"""

import math
import logging
from typing import List, Optional

import numpy as np

from models import Restaurant, Review, RatingTrend

logger = logging.getLogger(__name__)

MIN_REVIEWS_FOR_WEIGHTED = 5
MIN_REVIEWS_FOR_TREND = 10
TREND_THRESHOLD = 0.3
MAX_REVIEW_WEIGHT = 3.0
GOOD_RATING = 4.0


def round_half_up(value: float, digits: int = 1) -> float:
    """Half-up rounding (0.25 -> 0.3), unlike the built-in round()"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _is_valid_rating(review: Optional[Review]) -> bool:
    return review is not None and 1 <= review.rating <= 5


class RatingEngine:
    """Computes rating statistics for restaurants"""

    def average_rating(self, restaurant: Optional[Restaurant]) -> float:
        """Mean of valid 1-5 ratings rounded to one decimal, 0.0 when there are none"""
        if restaurant is None or not restaurant.reviews:
            return 0.0

        ratings = [r.rating for r in restaurant.reviews if _is_valid_rating(r)]
        if not ratings:
            return 0.0
        return round_half_up(float(np.mean(ratings)), 1)

    def weighted_rating(self, restaurant: Optional[Restaurant]) -> float:
        """
        Credibility-weighted mean rating.

        Below MIN_REVIEWS_FOR_WEIGHTED reviews this is the plain average.
        Each review weight combines reviewer level, verification,
        helpfulness votes and recency, capped at MAX_REVIEW_WEIGHT.
        """
        if restaurant is None or not restaurant.reviews:
            return 0.0

        if len(restaurant.reviews) < MIN_REVIEWS_FOR_WEIGHTED:
            return self.average_rating(restaurant)

        valid = [r for r in restaurant.reviews if _is_valid_rating(r)]
        weights = np.array([self.review_weight(r) for r in valid], dtype=float)
        if weights.sum() == 0:
            return 0.0

        ratings = np.array([r.rating for r in valid], dtype=float)
        return round_half_up(float((ratings * weights).sum() / weights.sum()), 1)

    def review_weight(self, review: Review) -> float:
        weight = 1.0

        if 1 <= review.user_level <= 5:
            weight *= 0.5 + review.user_level * 0.2

        if review.verified:
            weight *= 1.3

        if review.helpful_count > 20:
            weight *= 1.4
        elif review.helpful_count > 10:
            weight *= 1.2
        elif review.helpful_count > 5:
            weight *= 1.1

        weight *= 1.2 if review.is_recent() else 0.9

        return min(weight, MAX_REVIEW_WEIGHT)

    def rating_distribution(self, restaurant: Optional[Restaurant]) -> List[int]:
        """Counts of 1..5 star reviews (index 0 holds one-star reviews)"""
        distribution = [0] * 5
        if restaurant is None:
            return distribution

        for review in restaurant.reviews:
            if _is_valid_rating(review):
                distribution[review.rating - 1] += 1
        return distribution

    def rating_trend(self, restaurant: Optional[Restaurant]) -> RatingTrend:
        """Compare the later half of dated reviews against the earlier half"""
        if restaurant is None:
            return RatingTrend.UNKNOWN

        if len(restaurant.reviews) < MIN_REVIEWS_FOR_TREND:
            return RatingTrend.INSUFFICIENT_DATA

        dated = sorted(
            (r for r in restaurant.reviews if r is not None and r.created_at is not None),
            key=lambda r: r.created_at
        )
        if len(dated) < MIN_REVIEWS_FOR_TREND:
            return RatingTrend.INSUFFICIENT_DATA

        mid = len(dated) // 2
        difference = self._mean_rating(dated[mid:]) - self._mean_rating(dated[:mid])
        logger.debug(f"Rating trend for {restaurant.name}: difference {difference:.2f}")

        if difference > TREND_THRESHOLD:
            return RatingTrend.IMPROVING
        if difference < -TREND_THRESHOLD:
            return RatingTrend.DECLINING
        return RatingTrend.STABLE

    def _mean_rating(self, reviews: List[Review]) -> float:
        ratings = [r.rating for r in reviews if _is_valid_rating(r)]
        return float(np.mean(ratings)) if ratings else 0.0

    def filter_by_rating_range(self, restaurants: List[Restaurant],
                               min_rating: Optional[float] = None,
                               max_rating: Optional[float] = None) -> List[Restaurant]:
        """Keep restaurants whose average rating is within the inclusive bounds"""
        result = []
        for restaurant in restaurants or []:
            if restaurant is None:
                continue
            rating = self.average_rating(restaurant)
            if min_rating is not None and rating < min_rating:
                continue
            if max_rating is not None and rating > max_rating:
                continue
            result.append(restaurant)
        return result

    def top_rated(self, restaurants: List[Restaurant], limit: int = 10) -> List[Restaurant]:
        if limit <= 0:
            limit = 10

        reviewed = [r for r in restaurants or [] if r is not None and r.active and r.reviews]
        reviewed.sort(key=lambda r: (self.weighted_rating(r), r.review_count), reverse=True)
        return reviewed[:limit]

    def filter_by_min_review_count(self, restaurants: List[Restaurant], min_count: int) -> List[Restaurant]:
        min_count = max(0, min_count)
        return [r for r in restaurants or [] if r is not None and r.review_count >= min_count]

    def sort_by_rating(self, restaurants: List[Restaurant], ascending: bool = True) -> List[Restaurant]:
        return sorted(restaurants or [], key=self.average_rating, reverse=not ascending)

    def has_good_rating(self, restaurant: Optional[Restaurant], min_review_count: int = 0) -> bool:
        if restaurant is None or restaurant.review_count < min_review_count:
            return False
        return self.average_rating(restaurant) >= GOOD_RATING
