#!/usr/bin/env python3
"""
discover.py
Command line interface for the Restaurant Discovery Engine
"""

import argparse
import sys
import logging
from typing import Any, Dict, List

from api import RestaurantDiscoveryAPI
from models import CuisineType, Location, SortType, UserPreferences
from config import config


def setup_logging(verbose: bool = False):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def print_restaurants(restaurants: List[Dict[str, Any]], extra_key: str = None, extra_label: str = None):
    """Print restaurant summaries as a numbered list"""
    if not restaurants:
        print("😞 No restaurants found")
        return

    print("=" * 60)
    for i, r in enumerate(restaurants, 1):
        status = "🟢 營業中" if r.get('open_now') else "🔴 休息中"
        print(f"\n{i}. {r['name']} ({r.get('cuisine') or '未分類'}) {status}")
        print(f"   ⭐ {r['rating']} ({r['review_count']} reviews)   💰 {r['price_range']}")
        if r.get('address'):
            print(f"   📍 {r['address']}")
        if r.get('distance_km') is not None:
            print(f"   🚶 {r['distance_km']} km away")
        if extra_key and extra_key in r:
            print(f"   {extra_label}: {r[extra_key]}")


def report(result: Dict[str, Any], extra_key: str = None, extra_label: str = None):
    if not result["success"]:
        print(f"❌ Error: {result.get('error')}")
        sys.exit(1)
    restaurants = result.get('restaurants', result.get('recommendations', []))
    print(f"\n🎯 Found {len(restaurants)} restaurants:")
    print_restaurants(restaurants, extra_key, extra_label)


def search_restaurants(args):
    """Multi-criteria search"""
    api = RestaurantDiscoveryAPI()
    result = api.search(
        keyword=args.keyword,
        city=args.city,
        district=args.district,
        cuisine=args.cuisine,
        min_rating=args.min_rating,
        max_rating=args.max_rating,
        min_price=args.min_price,
        max_price=args.max_price,
        price_level=args.price_level,
        open_now=args.open_now,
        delivery=args.delivery,
        takeout=args.takeout,
        parking=args.parking,
        latitude=args.latitude,
        longitude=args.longitude,
        radius_km=args.radius,
        sort_by=args.sort,
        descending=args.descending,
        limit=args.limit,
        offset=args.offset,
    )
    report(result)


def fuzzy_search(args):
    api = RestaurantDiscoveryAPI()
    print(f"🔍 Fuzzy name search: {args.keyword}")
    report(api.fuzzy_search(args.keyword))


def global_search(args):
    api = RestaurantDiscoveryAPI()
    print(f"🔍 Searching everywhere for: {args.keyword}")
    report(api.global_search(args.keyword))


def recommend(args):
    """Preference-based recommendations"""
    api = RestaurantDiscoveryAPI()

    prefs = UserPreferences(
        max_price_level=args.max_price_level,
        min_acceptable_rating=args.min_rating,
        requires_parking=args.parking,
        prefer_delivery=args.delivery,
        prefer_takeout=args.takeout,
        max_distance_km=args.max_distance,
    )
    for name in args.like or []:
        prefs.add_favorite_cuisine(CuisineType.from_value(name))
    for name in args.dislike or []:
        prefs.add_disliked_cuisine(CuisineType.from_value(name))
    if args.latitude is not None and args.longitude is not None:
        prefs.user_location = Location(args.latitude, args.longitude)

    print("🧠 Ranking restaurants by your preferences...")
    report(api.recommend(prefs, args.limit), 'match_score', '🎯 Match score')


def popular(args):
    api = RestaurantDiscoveryAPI()
    report(api.popular(args.limit), 'popularity', '🔥 Popularity')


def top_picks(args):
    api = RestaurantDiscoveryAPI()
    report(api.top_picks(args.latitude, args.longitude, args.limit))


def similar(args):
    api = RestaurantDiscoveryAPI()
    result = api.similar(args.restaurant)
    if result["success"]:
        print(f"🔗 Restaurants similar to {result['reference']}")
    report(result, 'similarity', '🔗 Similarity')


def budget(args):
    api = RestaurantDiscoveryAPI()
    print(f"💰 Budget: ${args.budget}")
    report(api.budget(args.budget), 'effective_price', '💵 Typical price')


def details(args):
    """Show everything known about one restaurant"""
    api = RestaurantDiscoveryAPI()
    result = api.restaurant_details(args.restaurant)
    if not result["success"]:
        print(f"❌ Error: {result.get('error')}")
        sys.exit(1)

    r = result['restaurant']
    print(f"\n🍽️  {r['name']} ({r.get('cuisine') or '未分類'})")
    print("=" * 60)
    if r.get('description'):
        print(r['description'])
    print(f"📍 {r.get('address') or 'Unknown address'}")
    print(f"⭐ {r['rating']} average / {r['weighted_rating']} weighted ({r['review_count']} reviews)")
    print(f"📊 Distribution (1-5★): {r['rating_distribution']}   Trend: {r['rating_trend']}")
    print(f"💰 {r['price_range']} (typical ${r['effective_price']})")
    print(f"🕒 {r['hours_summary']}, {r['weekly_hours']} hours/week")
    print(f"   {'🟢 Open now' if r['open_now'] else '🔴 Closed'}; next open: {r['next_open'] or 'unknown'}")
    features = [label for key, label in (('has_delivery', 'delivery'), ('has_takeout', 'takeout'),
                                         ('has_parking', 'parking')) if r.get(key)]
    print(f"✨ Features: {', '.join(features) or 'none'}")


def stats(args):
    api = RestaurantDiscoveryAPI()
    status = api.system_status()
    prices = api.price_stats()

    if not status["success"] or not prices["success"]:
        print(f"❌ Error getting system stats: {status.get('error') or prices.get('error')}")
        sys.exit(1)

    print("📊 Restaurant Discovery Engine Status")
    print("=" * 40)
    print(f"🍽️  Restaurants: {status['restaurants']} ({status['active_restaurants']} active)")
    print(f"🟢 Open now: {status['open_now']}")
    print(f"📅 Holidays on calendar: {status['holidays']}")
    s = prices['stats']
    print(f"💰 Prices: min ${s['min']}, median ${s['median']}, average ${s['average']}, max ${s['max']}")


def main():
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Discover - Restaurant search and recommendation engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
        # Highly rated Taiwanese food in 西屯區
        python discover.py search --cuisine TAIWANESE --district 西屯區 --min-rating 4.5

        # Restaurants within 2 km, nearest first
        python discover.py search --lat 24.1477 --lng 120.6736 --radius 2 --sort DISTANCE

        # Recommendations for someone who loves hot pot and needs parking
        python discover.py recommend --like HOT_POT --parking

        # Places like 春水堂
        python discover.py similar 春水堂創始店
        """
    )

    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Search command
    search_parser = subparsers.add_parser('search', help='Search with filters')
    search_parser.add_argument('--keyword', '-k', help='Keyword matched against name, description, cuisine, city and address')
    search_parser.add_argument('--city', help='City name')
    search_parser.add_argument('--district', help='District name')
    search_parser.add_argument('--cuisine', help='Cuisine type (e.g. TAIWANESE or 台式料理)')
    search_parser.add_argument('--min-rating', type=float, help='Minimum average rating')
    search_parser.add_argument('--max-rating', type=float, help='Maximum average rating')
    search_parser.add_argument('--min-price', type=float, help='Minimum typical price')
    search_parser.add_argument('--max-price', type=float, help='Maximum typical price')
    search_parser.add_argument('--price-level', type=int, choices=[1, 2, 3, 4], help='Price level 1-4')
    search_parser.add_argument('--open-now', action='store_true', help='Only restaurants open right now')
    search_parser.add_argument('--delivery', action='store_true', help='Offers delivery')
    search_parser.add_argument('--takeout', action='store_true', help='Offers takeout')
    search_parser.add_argument('--parking', action='store_true', help='Has parking')
    search_parser.add_argument('--lat', '--latitude', dest='latitude', type=float, help='Latitude for radius search')
    search_parser.add_argument('--lng', '--longitude', dest='longitude', type=float, help='Longitude for radius search')
    search_parser.add_argument('--radius', type=float, help=f'Search radius in km (default: {config.default_radius_km})')
    search_parser.add_argument('--sort', choices=[s.value for s in SortType], help='Sort key')
    search_parser.add_argument('--descending', action='store_true', help='Sort descending')
    search_parser.add_argument('--limit', type=int, default=config.default_limit,
                               help=f'Page size (default: {config.default_limit})')
    search_parser.add_argument('--offset', type=int, default=0, help='Results to skip')

    # Fuzzy and global search
    fuzzy_parser = subparsers.add_parser('fuzzy', help='Typo-tolerant name search')
    fuzzy_parser.add_argument('keyword', help='Name or part of a name')

    find_parser = subparsers.add_parser('find', help='Keyword search across all fields')
    find_parser.add_argument('keyword', help='Keyword')

    # Recommend command
    recommend_parser = subparsers.add_parser('recommend', help='Recommendations from your preferences')
    recommend_parser.add_argument('--like', nargs='*', help='Favorite cuisines')
    recommend_parser.add_argument('--dislike', nargs='*', help='Cuisines to avoid')
    recommend_parser.add_argument('--max-price-level', type=int, default=4, help='Highest acceptable price level (default: 4)')
    recommend_parser.add_argument('--min-rating', type=float, default=0.0, help='Lowest acceptable rating (default: 0)')
    recommend_parser.add_argument('--parking', action='store_true', help='Parking is required')
    recommend_parser.add_argument('--delivery', action='store_true', help='Prefer delivery')
    recommend_parser.add_argument('--takeout', action='store_true', help='Prefer takeout')
    recommend_parser.add_argument('--lat', '--latitude', dest='latitude', type=float, help='Your latitude')
    recommend_parser.add_argument('--lng', '--longitude', dest='longitude', type=float, help='Your longitude')
    recommend_parser.add_argument('--max-distance', type=float, default=10.0, help='Max distance in km (default: 10)')
    recommend_parser.add_argument('--limit', type=int, default=10, help='Maximum number of recommendations (default: 10)')

    # Popular and top picks
    popular_parser = subparsers.add_parser('popular', help='Most popular restaurants')
    popular_parser.add_argument('--limit', type=int, default=10, help='Number of restaurants (default: 10)')

    picks_parser = subparsers.add_parser('top-picks', help='Best nearby picks')
    picks_parser.add_argument('--lat', '--latitude', dest='latitude', type=float, help='Your latitude')
    picks_parser.add_argument('--lng', '--longitude', dest='longitude', type=float, help='Your longitude')
    picks_parser.add_argument('--limit', type=int, default=5, help='Number of picks (default: 5)')

    # Similar, budget and details
    similar_parser = subparsers.add_parser('similar', help='Restaurants similar to another')
    similar_parser.add_argument('restaurant', help='Restaurant id or name')

    budget_parser = subparsers.add_parser('budget', help='Best value within a budget')
    budget_parser.add_argument('budget', type=float, help='Budget per person')

    details_parser = subparsers.add_parser('details', help='Show restaurant details')
    details_parser.add_argument('restaurant', help='Restaurant id or name')

    # Stats command
    subparsers.add_parser('stats', help='Show catalog statistics')

    args = parser.parse_args()

    # Setup logging
    setup_logging(args.verbose)

    commands = {
        'search': search_restaurants,
        'fuzzy': fuzzy_search,
        'find': global_search,
        'recommend': recommend,
        'popular': popular,
        'top-picks': top_picks,
        'similar': similar,
        'budget': budget,
        'details': details,
        'stats': stats,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)
    handler(args)


if __name__ == "__main__":
    main()
