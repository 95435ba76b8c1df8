import logging
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from depot.core.permissions import IsManager, IsWarehouseManager
from .models import EquipmentType, WarehouseEquipment, EquipmentStatus
from .serializers import EquipmentTypeSerializer, WarehouseEquipmentSerializer

logger = logging.getLogger('depot.equipment')


def _equipment_queryset(request):
    queryset = WarehouseEquipment.objects.select_related('equipment_type', 'warehouse')
    warehouse = request.query_params.get('warehouse')
    if warehouse:
        queryset = queryset.filter(warehouse_id=warehouse)
    status_filter = request.query_params.get('status')
    if status_filter in EquipmentStatus.values:
        queryset = queryset.filter(status=status_filter)
    return queryset.order_by('name')


# Equipment types
@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def equipment_type_list_create(request):
    if request.method == 'GET':
        return Response(EquipmentTypeSerializer(EquipmentType.objects.all(), many=True).data)

    serializer = EquipmentTypeSerializer(data=request.data)
    if serializer.is_valid():
        equipment_type = serializer.save()
        logger.info(f"Equipment type '{equipment_type.name}' created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsWarehouseManager])
def equipment_type_detail(request, pk):
    equipment_type = get_object_or_404(EquipmentType, pk=pk)

    if request.method == 'GET':
        return Response(EquipmentTypeSerializer(equipment_type).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = EquipmentTypeSerializer(equipment_type, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            equipment_type.delete()
        except ProtectedError:
            logger.warning(f"Equipment type '{equipment_type.name}' is in use and cannot be deleted")
            return Response({'error': 'Equipment type is in use and cannot be deleted'},
                            status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


# Equipment
@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def equipment_list_create(request):
    """Equipment filtered by ``warehouse`` and ``status``"""
    if request.method == 'GET':
        return Response(WarehouseEquipmentSerializer(_equipment_queryset(request), many=True).data)

    serializer = WarehouseEquipmentSerializer(data=request.data)
    if serializer.is_valid():
        equipment = serializer.save()
        logger.info(f"Equipment '{equipment.name}' added to warehouse '{equipment.warehouse.name}'")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsWarehouseManager])
def equipment_detail(request, pk):
    equipment = get_object_or_404(WarehouseEquipment, pk=pk)

    if request.method == 'GET':
        return Response(WarehouseEquipmentSerializer(equipment).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = WarehouseEquipmentSerializer(equipment, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Equipment {pk} updated: '{equipment.name}', status {equipment.status}")
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        equipment.delete()
        logger.info(f"Equipment {pk} deleted")
        return Response(status=status.HTTP_204_NO_CONTENT)


# Director (read-only)
@api_view(['GET'])
@permission_classes([IsManager])
def manager_equipment_list(request):
    return Response(WarehouseEquipmentSerializer(_equipment_queryset(request), many=True).data)
