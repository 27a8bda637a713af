"""
price_analyzer.py
Price estimation, price-level categorization and budget matching
"""

import logging
from typing import List, Optional

import numpy as np

from models import Restaurant, PriceStatistics
from rating_engine import RatingEngine, round_half_up

logger = logging.getLogger(__name__)

PRICE_LEVEL_CHEAP = 1       # < $200
PRICE_LEVEL_MODERATE = 2    # $200 - $500
PRICE_LEVEL_EXPENSIVE = 3   # $500 - $1000
PRICE_LEVEL_LUXURY = 4      # > $1000

BUDGET_TOLERANCE = 1.1
AFFORDABLE_FACTOR = 1.2

PRICE_LEVEL_DESCRIPTIONS = {
    PRICE_LEVEL_CHEAP: "平價 (< $200)",
    PRICE_LEVEL_MODERATE: "中等 ($200 - $500)",
    PRICE_LEVEL_EXPENSIVE: "高級 ($500 - $1000)",
    PRICE_LEVEL_LUXURY: "奢華 (> $1000)",
}
UNKNOWN_DESCRIPTION = "未知"


class PriceAnalyzer:
    """Analyzes restaurant prices"""

    def __init__(self, rating_engine: Optional[RatingEngine] = None):
        self.rating_engine = rating_engine or RatingEngine()

    def effective_price(self, restaurant: Optional[Restaurant]) -> float:
        """Mean price of available menu items, falling back to the stored average price"""
        if restaurant is None:
            return 0.0

        prices = [item.price for item in restaurant.menu
                  if item is not None and item.available and item.price > 0]
        if not prices:
            return restaurant.average_price
        return round_half_up(float(np.mean(prices)), 2)

    def categorize_price_level(self, restaurant: Optional[Restaurant]) -> int:
        """Stored price level if set, otherwise derived from the effective price (0 = unknown)"""
        if restaurant is None:
            return 0
        if restaurant.price_level > 0:
            return restaurant.price_level

        price = self.effective_price(restaurant)
        if price <= 0:
            return 0
        if price < 200:
            return PRICE_LEVEL_CHEAP
        if price < 500:
            return PRICE_LEVEL_MODERATE
        if price < 1000:
            return PRICE_LEVEL_EXPENSIVE
        return PRICE_LEVEL_LUXURY

    def price_statistics(self, restaurants: List[Restaurant]) -> PriceStatistics:
        """
        Count, min, max, mean and median over positive effective prices.

        The median is the element at index n // 2 of the sorted prices, so
        even-sized sets report the upper of the two middle values.
        """
        prices = sorted(
            p for p in (self.effective_price(r) for r in restaurants or [] if r is not None)
            if p > 0
        )
        if not prices:
            return PriceStatistics()

        return PriceStatistics(
            count=len(prices),
            min_price=prices[0],
            max_price=prices[-1],
            average_price=float(np.mean(prices)),
            median_price=prices[len(prices) // 2],
        )

    def value_score(self, restaurant: Restaurant) -> float:
        price = self.effective_price(restaurant)
        rating = self.rating_engine.average_rating(restaurant)
        if price <= 0:
            return rating
        return rating * 100 / price

    def recommend_by_budget(self, restaurants: List[Restaurant], budget: float) -> List[Restaurant]:
        """Restaurants within 110% of the budget, best rating-per-dollar first"""
        if budget <= 0:
            return []

        eligible = []
        for restaurant in restaurants or []:
            if restaurant is None or not restaurant.active:
                continue
            price = self.effective_price(restaurant)
            if price <= 0:
                continue
            if price <= budget * BUDGET_TOLERANCE:
                eligible.append(restaurant)

        logger.debug(f"{len(eligible)} restaurants fit a budget of {budget}")
        return sorted(eligible, key=self.value_score, reverse=True)

    def filter_by_price_range(self, restaurants: List[Restaurant],
                              min_price: Optional[float] = None,
                              max_price: Optional[float] = None) -> List[Restaurant]:
        if min_price is not None and max_price is not None and min_price > max_price:
            return []

        result = []
        for restaurant in restaurants or []:
            if restaurant is None:
                continue
            price = self.effective_price(restaurant)
            # No price data
            if price <= 0:
                continue
            if min_price is not None and price < min_price:
                continue
            if max_price is not None and price > max_price:
                continue
            result.append(restaurant)
        return result

    def filter_by_price_level(self, restaurants: List[Restaurant], price_level: int) -> List[Restaurant]:
        if price_level < 1 or price_level > 4:
            return list(restaurants or [])
        return [r for r in restaurants or []
                if r is not None and self.categorize_price_level(r) == price_level]

    def sort_by_price(self, restaurants: List[Restaurant], ascending: bool = True) -> List[Restaurant]:
        return sorted((r for r in restaurants or [] if r is not None),
                      key=self.effective_price, reverse=not ascending)

    def price_range_description(self, restaurant: Optional[Restaurant]) -> str:
        level = self.categorize_price_level(restaurant)
        return PRICE_LEVEL_DESCRIPTIONS.get(level, UNKNOWN_DESCRIPTION)

    def is_affordable(self, restaurant: Optional[Restaurant], reference: List[Restaurant]) -> bool:
        """At most 20% above the reference set's average price"""
        if restaurant is None:
            return False

        stats = self.price_statistics(reference)
        if stats.count == 0:
            return True

        price = self.effective_price(restaurant)
        if price <= 0:
            return True
        return price <= stats.average_price * AFFORDABLE_FACTOR
