import logging
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from depot.catalog.models import Product
from depot.core.exceptions import BusinessRuleError
from depot.core.model_cache import (
    get_cached_warehouse_list, cache_warehouse_list,
    get_cached_warehouse_zones, cache_warehouse_zones
)
from depot.core.permissions import IsEmployee, IsWarehouseManager
from depot.core.utils import create_audit_log
from . import placement
from .models import Warehouse, Shelf, StorageZone
from .serializers import (
    WarehouseSerializer, WarehouseCreateSerializer, ShelfSerializer, StorageZoneSerializer,
    PlacementSerializer, MoveSerializer
)

logger = logging.getLogger('depot.locations')


def _warehouse_list_data():
    cached_data = get_cached_warehouse_list()
    if cached_data is not None:
        return cached_data
    data = WarehouseSerializer(Warehouse.objects.prefetch_related('shelves'), many=True).data
    cache_warehouse_list(data)
    return data


@api_view(['GET'])
@permission_classes([IsEmployee])
def warehouse_list(request):
    """Read-only warehouse list for any employee"""
    return Response(_warehouse_list_data())


@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def warehouse_list_create(request):
    """List warehouses or create one together with its shelves and zones"""
    if request.method == 'GET':
        return Response(_warehouse_list_data())

    serializer = WarehouseCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        warehouse = placement.create_warehouse_with_structure(
            name=data['name'],
            warehouse_type=data['type'],
            address=data['address'],
            shelf_count=data['shelf_count'],
            zones_per_shelf=data['zones_per_shelf'],
            zone_length=data['zone_length'],
            zone_width=data['zone_width'],
            zone_height=data['zone_height'],
            latitude=data['latitude'],
            longitude=data['longitude'],
        )
    except BusinessRuleError as e:
        logger.warning(f"Warehouse creation refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Unexpected error creating warehouse: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    create_audit_log(request=request, action='create', model_name='Warehouse', object_id=warehouse.id,
                     object_reference=warehouse.name, changes={'shelves': data['shelf_count'],
                                                               'zones_per_shelf': data['zones_per_shelf']})
    return Response(WarehouseSerializer(warehouse).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsWarehouseManager])
def warehouse_detail(request, pk):
    """Retrieve, rename/relocate or delete an empty warehouse"""
    warehouse = get_object_or_404(Warehouse, pk=pk)

    if request.method == 'GET':
        return Response(WarehouseSerializer(warehouse).data)
    elif request.method == 'PATCH':
        # Type and volume follow from the structure and stay fixed
        allowed = {k: v for k, v in request.data.items() if k in ('name', 'address', 'latitude', 'longitude')}
        serializer = WarehouseSerializer(warehouse, data=allowed, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            placement.delete_warehouse_if_empty(warehouse)
        except BusinessRuleError as e:
            return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def warehouse_shelves(request, pk):
    """List shelves of a warehouse or add a shelf with zones"""
    warehouse = get_object_or_404(Warehouse, pk=pk)
    if request.method == 'GET':
        return Response(ShelfSerializer(warehouse.shelves.all(), many=True).data)

    data = dict(request.data.items())
    data['warehouse'] = warehouse.id
    if not data.get('code'):
        data['code'] = placement.shelf_code(warehouse.shelves.count())
    serializer = ShelfSerializer(data=data)
    if serializer.is_valid():
        shelf = serializer.save()
        logger.info(f"Shelf {shelf.code} added to warehouse {warehouse.name}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['DELETE'])
@permission_classes([IsWarehouseManager])
def shelf_detail(request, pk):
    shelf = get_object_or_404(Shelf, pk=pk)
    try:
        placement.delete_shelf_if_empty(shelf)
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsWarehouseManager])
def shelf_zone_create(request, pk):
    shelf = get_object_or_404(Shelf, pk=pk)
    data = dict(request.data.items())
    data['shelf'] = shelf.id
    if not data.get('label'):
        data['label'] = f'{shelf.code}-{shelf.zones.count() + 1}'
    serializer = StorageZoneSerializer(data=data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def warehouse_zones(request, pk):
    """Zones of a warehouse with capacity, occupancy and free volume"""
    warehouse = get_object_or_404(Warehouse, pk=pk)
    cached_data = get_cached_warehouse_zones(warehouse.id)
    if cached_data is not None:
        return Response(cached_data)
    data = placement.zones_by_warehouse(warehouse)
    cache_warehouse_zones(warehouse.id, data)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def warehouse_statistics(request, pk):
    warehouse = get_object_or_404(Warehouse, pk=pk)
    return Response(placement.detailed_statistics(warehouse))


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def warehouse_underutilized_zones(request, pk):
    """Zones at or below ``max_occupancy`` percent (default 50), least occupied first"""
    warehouse = get_object_or_404(Warehouse, pk=pk)
    try:
        max_occupancy = float(request.query_params.get('max_occupancy', 50))
    except ValueError:
        return Response({'error': 'max_occupancy must be a number'}, status=status.HTTP_400_BAD_REQUEST)
    return Response(placement.underutilized_zones(warehouse, max_occupancy))


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def zone_detail(request, pk):
    zone = get_object_or_404(StorageZone.objects.select_related('shelf__warehouse'), pk=pk)
    return Response(placement.zone_info(zone))


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def product_locations(request, pk):
    product = get_object_or_404(Product, pk=pk)
    return Response(placement.find_product_locations(product))


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def placement_check(request):
    """Zones able to hold ``quantity`` units of ``product``"""
    try:
        product_id = int(request.query_params['product'])
        quantity = int(request.query_params.get('quantity', 1))
    except (KeyError, ValueError):
        return Response({'error': 'product and quantity must be integers'}, status=status.HTTP_400_BAD_REQUEST)
    if quantity < 1:
        return Response({'error': 'quantity must be at least 1'}, status=status.HTTP_400_BAD_REQUEST)
    product = get_object_or_404(Product, pk=product_id)
    zones = placement.check_placement_possibility(product, quantity)
    return Response({'possible': bool(zones), 'zones': zones})


@api_view(['POST'])
@permission_classes([IsWarehouseManager])
def placement_place(request):
    """Place units awaiting placement; into ``zone`` when given, otherwise optimally"""
    serializer = PlacementSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    product = get_object_or_404(Product, pk=data['product'])
    try:
        if data.get('zone'):
            zone = get_object_or_404(StorageZone.objects.select_related('shelf__warehouse'), pk=data['zone'])
            result = placement.place_in_zone(product, zone, data['quantity'])
        else:
            result = placement.place_optimal(product, data['quantity'])
    except BusinessRuleError as e:
        logger.warning(f"Placement of product {product.id} refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Unexpected error placing product {product.id}: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    create_audit_log(request=request, action='placement', model_name='Product', object_id=product.id,
                     object_reference=product.article, changes=result)
    return Response(result, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsWarehouseManager])
def placement_remove(request):
    serializer = PlacementSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    if not data.get('zone'):
        return Response({'zone': ['This field is required.']}, status=status.HTTP_400_BAD_REQUEST)
    product = get_object_or_404(Product, pk=data['product'])
    zone = get_object_or_404(StorageZone, pk=data['zone'])
    try:
        result = placement.remove_from_zone(product, zone, data['quantity'])
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsWarehouseManager])
def placement_move(request):
    serializer = MoveSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    product = get_object_or_404(Product, pk=data['product'])
    from_zone = get_object_or_404(StorageZone.objects.select_related('shelf__warehouse'), pk=data['from_zone'])
    to_zone = get_object_or_404(StorageZone.objects.select_related('shelf__warehouse'), pk=data['to_zone'])
    try:
        result = placement.move_product(product, from_zone, to_zone, data['quantity'])
    except BusinessRuleError as e:
        logger.warning(f"Move of product {product.id} refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(result)
