"""
Cache invalidation signals
Automatically invalidate warehouse caches when the storage hierarchy changes
"""
from django.conf import settings
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from django.core.cache import cache
import logging
import threading
from contextlib import contextmanager
from .model_cache import WAREHOUSE_ZONES_KEY_PREFIX, invalidate_warehouse_cache, get_warehouse_zones_cache_key

logger = logging.getLogger('depot.core')

STORAGE_MODELS = {
    ('locations', 'Warehouse'), ('locations', 'Shelf'), ('locations', 'StorageZone'),
    ('locations', 'ZoneProduct'),
    # Package dimensions drive zone occupancy
    ('catalog', 'ProductAttributeValue'),
}

# Thread-local storage to track signal suspension
_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Context manager to temporarily suspend cache invalidation signals.
    Useful for bulk operations to prevent excessive cache clearing.
    Remember to manually invalidate cache after the block!
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


def uses_redis_cache():
    return settings.CACHES['default']['BACKEND'] == 'django_redis.cache.RedisCache'


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern
    Uses Redis SCAN to find and delete matching keys
    """
    from django_redis import get_redis_connection
    redis_conn = get_redis_connection("default")

    keys = []
    cursor = 0
    while True:
        cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
        keys.extend(partial_keys)
        if cursor == 0:
            break

    if keys:
        redis_conn.delete(*keys)
        logger.info(f"Cache invalidation requested for pattern: {pattern} - Deleted {len(keys)} keys")
    else:
        logger.info(f"Cache invalidation requested for pattern: {pattern} - No keys found")


def invalidate_all_warehouse_zones():
    """Drop every per-warehouse zone table"""
    if uses_redis_cache():
        try:
            invalidate_cache_pattern(WAREHOUSE_ZONES_KEY_PREFIX)
            return
        except Exception as e:
            logger.warning(f"Could not invalidate cache pattern {WAREHOUSE_ZONES_KEY_PREFIX}: {str(e)}")
    from depot.locations.models import Warehouse
    cache.delete_many([get_warehouse_zones_cache_key(pk) for pk in Warehouse.objects.values_list('pk', flat=True)])


def _warehouse_id_for(instance):
    """Warehouse owning the changed row, None when it can no longer be resolved"""
    from depot.locations.models import Warehouse, Shelf, StorageZone, ZoneProduct
    if isinstance(instance, Warehouse):
        return instance.pk
    if isinstance(instance, Shelf):
        return instance.warehouse_id
    if isinstance(instance, StorageZone):
        return Shelf.objects.filter(pk=instance.shelf_id).values_list('warehouse_id', flat=True).first()
    if isinstance(instance, ZoneProduct):
        return StorageZone.objects.filter(pk=instance.zone_id).values_list('shelf__warehouse_id', flat=True).first()
    return None


def _warehouse_ids_storing(product_id):
    """Warehouses with at least one zone holding the product"""
    from depot.locations.models import ZoneProduct
    return set(ZoneProduct.objects.filter(product_id=product_id)
               .values_list('zone__shelf__warehouse_id', flat=True))


# --- Signal Handlers ---

@receiver([post_save, post_delete])
def invalidate_storage_cache(sender, instance, **kwargs):
    """Invalidate warehouse caches when warehouses, shelves, zones or their contents change"""
    if is_suspended():
        return
    if (sender._meta.app_label, sender.__name__) not in STORAGE_MODELS:
        return

    if sender.__name__ == 'ProductAttributeValue':
        warehouse_ids = _warehouse_ids_storing(instance.product_id)
        def invalidate_storing_warehouses():
            for pk in warehouse_ids:
                invalidate_warehouse_cache(pk)

        if warehouse_ids:
            transaction.on_commit(invalidate_storing_warehouses)
        return

    warehouse_id = _warehouse_id_for(instance)

    # Invalidate AFTER commit so the cache is not repopulated with stale data
    def invalidate_after_commit():
        if warehouse_id is None:
            invalidate_warehouse_cache()
            invalidate_all_warehouse_zones()
        else:
            invalidate_warehouse_cache(warehouse_id)

    transaction.on_commit(invalidate_after_commit)
