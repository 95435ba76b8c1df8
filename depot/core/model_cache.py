"""
Caching for frequently read warehouse data: the warehouse list and the
per-warehouse zone occupancy table.

Entries are invalidated by depot.core.cache_signals whenever warehouses,
shelves, zones or zone contents change.
"""
from django.core.cache import cache
import logging

logger = logging.getLogger('depot.core')

# Cache key prefixes
WAREHOUSE_LIST_KEY = 'warehouse_list:all'
WAREHOUSE_ZONES_KEY_PREFIX = 'warehouse_zones:'

# Cache TTL (Time To Live) in seconds
WAREHOUSE_LIST_CACHE_TTL = 600  # 10 minutes
WAREHOUSE_ZONES_CACHE_TTL = 300  # 5 minutes (changes with every placement)


def get_warehouse_zones_cache_key(warehouse_id: int) -> str:
    return f"{WAREHOUSE_ZONES_KEY_PREFIX}{warehouse_id}"


def get_cached_warehouse_list():
    cached_data = cache.get(WAREHOUSE_LIST_KEY)
    if cached_data is not None:
        logger.debug("Cache hit for warehouse list")
    return cached_data


def cache_warehouse_list(data, ttl: int = None):
    cache.set(WAREHOUSE_LIST_KEY, data, ttl or WAREHOUSE_LIST_CACHE_TTL)
    logger.debug(f"Cached warehouse list ({len(data)} warehouses)")


def get_cached_warehouse_zones(warehouse_id: int):
    cached_data = cache.get(get_warehouse_zones_cache_key(warehouse_id))
    if cached_data is not None:
        logger.debug(f"Cache hit for zones of warehouse {warehouse_id}")
    return cached_data


def cache_warehouse_zones(warehouse_id: int, data, ttl: int = None):
    cache.set(get_warehouse_zones_cache_key(warehouse_id), data, ttl or WAREHOUSE_ZONES_CACHE_TTL)


def invalidate_warehouse_cache(warehouse_id: int = None):
    """Drop the warehouse list and the zone table of one warehouse"""
    keys = [WAREHOUSE_LIST_KEY]
    if warehouse_id is not None:
        keys.append(get_warehouse_zones_cache_key(warehouse_id))
    cache.delete_many(keys)
    logger.debug(f"Invalidated warehouse cache (warehouse: {warehouse_id})")
