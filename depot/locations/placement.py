"""
Storage-zone placement and occupancy analytics.

Package dimensions are centimetres, zone volumes cubic metres and the
warehouse total volume litres. Placement only considers the zone geometry
(how many packages fit in the empty zone in the best orientation); the
zone's current load is used to rank candidate zones.
"""
import logging
from collections import defaultdict
from django.db import transaction
from depot.catalog.models import Product
from depot.core.cache_signals import suspend_cache_signals
from depot.core.exceptions import BusinessRuleError
from depot.core.model_cache import invalidate_warehouse_cache
from .models import Warehouse, Shelf, StorageZone, ZoneProduct, BoxOrientation

logger = logging.getLogger('depot.locations')

MAX_PLACEMENT_SEARCH = 10_000


def find_best_orientation(product, zone, quantity):
    """Orientation with the largest fit that still holds ``quantity``, or None"""
    length, width, height = product.get_package_dimensions()
    if length is None or width is None or height is None:
        return None
    best, best_fit = None, -1
    for orientation in BoxOrientation:
        fit = BoxOrientation.fit(orientation, zone, length, width, height)
        if fit >= quantity and fit > best_fit:
            best, best_fit = orientation, fit
    return best


def max_fitting_quantity(product, zone):
    """Largest quantity in 1..10000 that fits the zone, 0 when nothing fits"""
    lo, hi, best = 1, MAX_PLACEMENT_SEARCH, 0
    while lo <= hi:
        mid = (lo + hi) // 2
        if find_best_orientation(product, zone, mid) is not None:
            best = mid
            lo = mid + 1
        else:
            hi = mid - 1
    return best


def _zones_for(product):
    """Zones of every warehouse whose type matches the product"""
    return StorageZone.objects.filter(
        shelf__warehouse__type=product.warehouse_type
    ).select_related('shelf__warehouse').prefetch_related(
        'products__product__attribute_values__attribute'
    ).order_by('shelf__warehouse__name', 'shelf_id', 'id')


def _lock_product(product):
    return Product.objects.select_for_update().get(pk=product.pk)


def _placement_result(zone_product, quantity):
    zone = zone_product.zone
    return {
        'zone_id': zone.id,
        'zone_label': zone.label,
        'shelf_code': zone.shelf.code,
        'warehouse_name': zone.shelf.warehouse.name,
        'orientation': zone_product.orientation,
        'quantity': quantity,
    }


def place_in_zone(product, zone, quantity, orientation=None):
    """
    Place ``quantity`` units awaiting placement into ``zone``.

    Merges into an existing ZoneProduct row and decrements
    ``quantity_for_stock``. Raises BusinessRuleError when the warehouse type
    does not match, the product has too few units awaiting placement, or
    the quantity does not fit the zone.
    """
    if quantity <= 0:
        raise BusinessRuleError('Quantity must be greater than zero', field='quantity')
    with transaction.atomic():
        product = _lock_product(product)
        if not zone.can_store_product(product):
            raise BusinessRuleError('Warehouse type is not compatible with the product storage type')
        if product.quantity_for_stock < quantity:
            raise BusinessRuleError(
                f'Not enough units awaiting placement (available: {product.quantity_for_stock})',
                field='quantity',
            )
        if orientation is None:
            orientation = find_best_orientation(product, zone, quantity)
            if orientation is None:
                raise BusinessRuleError(f'Product does not fit into zone {zone.label}')

        zone_product, created = ZoneProduct.objects.select_for_update().get_or_create(
            zone=zone, product=product,
            defaults={'quantity': quantity, 'orientation': orientation},
        )
        if not created:
            zone_product.quantity += quantity
            zone_product.orientation = orientation
            zone_product.save(update_fields=['quantity', 'orientation'])

        product.quantity_for_stock -= quantity
        product.save(update_fields=['quantity_for_stock', 'updated_at'])

    logger.info(f"Placed {quantity} of '{product.name}' in zone {zone.label} ({orientation})")
    return _placement_result(zone_product, quantity)


def place_optimal(product, quantity):
    """Place into the least occupied compatible zone where the quantity fits"""
    if product.quantity_for_stock < quantity:
        raise BusinessRuleError(
            f'Not enough units awaiting placement (available: {product.quantity_for_stock})',
            field='quantity',
        )
    best_zone, best_orientation, best_occupancy = None, None, None
    for zone in _zones_for(product):
        orientation = find_best_orientation(product, zone, quantity)
        if orientation is None:
            continue
        occupancy = zone.occupancy_percentage
        if best_occupancy is None or occupancy < best_occupancy:
            best_zone, best_orientation, best_occupancy = zone, orientation, occupancy
    if best_zone is None:
        logger.warning(f"No storage zone fits {quantity} of '{product.name}'")
        raise BusinessRuleError('No suitable storage zone for the product')
    return place_in_zone(product, best_zone, quantity, best_orientation)


def remove_from_zone(product, zone, quantity):
    """Take units out of a zone back into ``quantity_for_stock``"""
    if quantity <= 0:
        raise BusinessRuleError('Quantity must be greater than zero', field='quantity')
    with transaction.atomic():
        product = _lock_product(product)
        try:
            zone_product = ZoneProduct.objects.select_for_update().get(zone=zone, product=product)
        except ZoneProduct.DoesNotExist:
            raise BusinessRuleError('Product is not stored in this zone')
        if zone_product.quantity < quantity:
            raise BusinessRuleError(f'Not enough units in the zone: {zone_product.quantity}', field='quantity')

        orientation = zone_product.orientation
        if zone_product.quantity == quantity:
            zone_product.delete()
        else:
            zone_product.quantity -= quantity
            zone_product.save(update_fields=['quantity'])

        product.quantity_for_stock += quantity
        product.save(update_fields=['quantity_for_stock', 'updated_at'])

    logger.info(f"Removed {quantity} of '{product.name}' from zone {zone.label}")
    return {'quantity': quantity, 'orientation': orientation}


def move_product(product, from_zone, to_zone, quantity):
    """Move units between zones; a failed placement restores the source zone"""
    with transaction.atomic():
        removal = remove_from_zone(product, from_zone, quantity)
        try:
            with transaction.atomic():
                placement = place_in_zone(product, to_zone, quantity)
        except BusinessRuleError as e:
            place_in_zone(product, from_zone, quantity, removal['orientation'])
            raise BusinessRuleError(f'Could not place into the target zone: {e.message}')
    logger.info(f"Moved {quantity} of '{product.name}': {from_zone.label} -> {to_zone.label}")
    return {
        'from_zone_id': from_zone.id,
        'to_zone_id': to_zone.id,
        'quantity': quantity,
        'orientation': placement['orientation'],
    }


def take_from_zones(product, quantity, warehouse=None):
    """
    Remove up to ``quantity`` units of a product from its zones in zone order.

    Used when stock physically leaves the warehouse (shipment, write-off);
    ``quantity_for_stock`` is not touched. Returns the number of units taken.
    """
    remaining = quantity
    rows = ZoneProduct.objects.select_for_update().filter(product=product).order_by('zone_id')
    if warehouse is not None:
        rows = rows.filter(zone__shelf__warehouse=warehouse)
    for zone_product in rows:
        if remaining <= 0:
            break
        taken = min(zone_product.quantity, remaining)
        if taken == zone_product.quantity:
            zone_product.delete()
        else:
            zone_product.quantity -= taken
            zone_product.save(update_fields=['quantity'])
        remaining -= taken
    if remaining > 0:
        logger.warning(f"Zones held {quantity - remaining} of {quantity} requested units of '{product.name}'")
    return quantity - remaining


def quantity_in_warehouse(product, warehouse):
    return sum(
        ZoneProduct.objects.filter(product=product, zone__shelf__warehouse=warehouse).values_list('quantity', flat=True)
    )


def shelf_code(index):
    """A..Z for the first 26 shelves, then ST-<n>"""
    if index < 26:
        return chr(ord('A') + index)
    return f'ST-{index + 1}'


@transaction.atomic
def create_warehouse_with_structure(name, warehouse_type, address, shelf_count, zones_per_shelf,
                                    zone_length, zone_width, zone_height, latitude=None, longitude=None):
    """Create a warehouse with ``shelf_count`` shelves of identical zones"""
    if Warehouse.objects.filter(name=name).exists():
        logger.error(f"Warehouse '{name}' already exists")
        raise BusinessRuleError(f"Warehouse '{name}' already exists", field='name')
    if shelf_count <= 0 or zones_per_shelf <= 0:
        raise BusinessRuleError('Shelf and zone counts must be positive')
    if zone_length <= 0 or zone_width <= 0 or zone_height <= 0:
        raise BusinessRuleError('Zone dimensions must be positive')

    zone_litres = zone_length * zone_width * zone_height / 1000
    with suspend_cache_signals():
        warehouse = Warehouse.objects.create(
            name=name,
            type=warehouse_type,
            address=address or '',
            total_volume=zone_litres * shelf_count * zones_per_shelf,
            latitude=latitude,
            longitude=longitude,
        )
        for i in range(shelf_count):
            shelf = Shelf.objects.create(code=shelf_code(i), warehouse=warehouse)
            StorageZone.objects.bulk_create([
                StorageZone(label=f'{shelf.code}-{j}', length=zone_length, width=zone_width,
                            height=zone_height, shelf=shelf)
                for j in range(1, zones_per_shelf + 1)
            ])
    transaction.on_commit(lambda: invalidate_warehouse_cache(warehouse.id))
    logger.info(f"Created warehouse '{name}': {shelf_count} shelves x {zones_per_shelf} zones, "
                f"{warehouse.total_volume} l")
    return warehouse


def delete_warehouse_if_empty(warehouse):
    if ZoneProduct.objects.filter(zone__shelf__warehouse=warehouse).exists():
        logger.error(f"Warehouse {warehouse.id} still holds products")
        raise BusinessRuleError('Warehouse still holds products and cannot be deleted')
    warehouse.delete()
    logger.info(f"Warehouse {warehouse.name} deleted")


def delete_shelf_if_empty(shelf):
    if ZoneProduct.objects.filter(zone__shelf=shelf).exists():
        logger.error(f"Shelf {shelf.id} still holds products")
        raise BusinessRuleError('Shelf still holds products and cannot be deleted')
    shelf.delete()
    logger.info(f"Shelf {shelf.code} deleted")


# Read models

def _warehouse_zones(warehouse):
    return StorageZone.objects.filter(shelf__warehouse=warehouse).select_related('shelf').prefetch_related(
        'products__product__attribute_values__attribute'
    ).order_by('shelf_id', 'id')


def find_product_locations(product):
    rows = ZoneProduct.objects.filter(product=product).select_related('zone__shelf__warehouse', 'product')
    return [
        {
            'zone_id': zp.zone.id,
            'zone_label': zp.zone.label,
            'shelf_code': zp.zone.shelf.code,
            'warehouse_name': zp.zone.shelf.warehouse.name,
            'quantity': zp.quantity,
            'orientation': zp.orientation,
            'total_volume': zp.total_volume,
        }
        for zp in rows
    ]


def zone_info(zone):
    zone_products = list(zone.products.select_related('product').prefetch_related('product__attribute_values__attribute'))
    used = sum(zp.total_volume for zp in zone_products)
    capacity = zone.capacity_volume
    return {
        'id': zone.id,
        'label': zone.label,
        'shelf_code': zone.shelf.code,
        'warehouse_name': zone.shelf.warehouse.name,
        'length': zone.length,
        'width': zone.width,
        'height': zone.height,
        'capacity_volume': capacity,
        'used_volume': used,
        'occupancy_percentage': used / capacity * 100 if capacity > 0 and used > 0 else 0.0,
        'products': [
            {
                'product_id': zp.product.id,
                'name': zp.product.name,
                'article': zp.product.article,
                'quantity': zp.quantity,
                'orientation': zp.orientation,
                'total_volume': zp.total_volume,
            }
            for zp in zone_products
        ],
    }


def zones_by_warehouse(warehouse):
    result = []
    for zone in _warehouse_zones(warehouse):
        capacity = zone.capacity_volume
        used = zone.used_volume
        result.append({
            'id': zone.id,
            'label': zone.label,
            'shelf_code': zone.shelf.code,
            'capacity_volume': capacity,
            'occupancy_percentage': used / capacity * 100 if capacity > 0 and used > 0 else 0.0,
            'available_volume': max(0.0, capacity - used),
        })
    return result


def check_placement_possibility(product, quantity):
    """Every compatible zone that fits ``quantity``, least occupied first"""
    result = []
    for zone in _zones_for(product):
        orientation = find_best_orientation(product, zone, quantity)
        if orientation is None:
            continue
        result.append({
            'zone_id': zone.id,
            'zone_label': zone.label,
            'shelf_code': zone.shelf.code,
            'warehouse_name': zone.shelf.warehouse.name,
            'max_quantity': max_fitting_quantity(product, zone),
            'orientation': orientation,
            'occupancy_percentage': zone.occupancy_percentage,
        })
    result.sort(key=lambda item: item['occupancy_percentage'])
    return result


def detailed_statistics(warehouse):
    zones = list(_warehouse_zones(warehouse))
    zone_products = [zp for zone in zones for zp in zone.products.all()]
    total_capacity = sum(zone.capacity_volume for zone in zones)
    used_volume = sum(zp.total_volume for zp in zone_products)

    volume_by_product = defaultdict(float)
    units_by_product = defaultdict(int)
    for zp in zone_products:
        volume_by_product[zp.product.name] += zp.total_volume
        units_by_product[zp.product.name] += zp.quantity
    top_products = sorted(volume_by_product.items(), key=lambda item: -item[1])[:5]

    return {
        'warehouse_name': warehouse.name,
        'total_shelves': warehouse.shelves.count(),
        'total_zones': len(zones),
        'total_capacity': total_capacity,
        'used_volume': used_volume,
        'occupancy_percentage': used_volume / total_capacity * 100 if total_capacity > 0 else 0.0,
        'total_units': sum(zp.quantity for zp in zone_products),
        'unique_products': len({zp.product_id for zp in zone_products}),
        'top_products': [
            {'name': name, 'quantity': units_by_product[name], 'volume': volume}
            for name, volume in top_products
        ],
    }


def recommendation(occupancy):
    if occupancy < 20:
        return 'Lots of free space'
    if occupancy < 60:
        return 'Optimal load'
    if occupancy < 85:
        return 'Well filled'
    return 'Almost full, add carefully'


def underutilized_zones(warehouse, max_occupancy):
    zones = [zone for zone in _warehouse_zones(warehouse) if zone.occupancy_percentage <= max_occupancy]
    zones.sort(key=lambda zone: zone.occupancy_percentage)
    return [
        {
            'zone_id': zone.id,
            'zone_label': zone.label,
            'shelf_code': zone.shelf.code,
            'occupancy_percentage': zone.occupancy_percentage,
            'available_volume': zone.capacity_volume - zone.used_volume,
            'recommendation': recommendation(zone.occupancy_percentage),
        }
        for zone in zones
    ]
