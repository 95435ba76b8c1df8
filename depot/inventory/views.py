import logging
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from depot.catalog.models import Product
from depot.core.exceptions import BusinessRuleError
from depot.core.permissions import IsManager, IsWarehouseManager, IsAccounter
from depot.locations.models import Warehouse
from . import services
from .models import WriteOffAct, WriteOffActStatus
from .serializers import WriteOffActSerializer, WriteOffActInputSerializer, RejectInputSerializer

logger = logging.getLogger('depot.inventory')


def _act_list(request, default_statuses=None):
    value = request.query_params.get('status')
    statuses = value.split(',') if value else default_statuses
    if statuses and any(s not in WriteOffActStatus.values for s in statuses):
        return Response({'error': 'Unknown status', 'field': 'status'}, status=status.HTTP_400_BAD_REQUEST)
    return Response(WriteOffActSerializer(services.acts_by_status(statuses), many=True).data)


def _act_detail(pk):
    return Response(WriteOffActSerializer(get_object_or_404(services.acts_by_status(), pk=pk)).data)


# Warehouse manager
@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def act_list_create(request):
    """List write-off acts or draft a new one"""
    if request.method == 'GET':
        return _act_list(request)

    serializer = WriteOffActInputSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    product = get_object_or_404(Product, pk=data['product'])
    warehouse = get_object_or_404(Warehouse, pk=data['warehouse'])
    try:
        act = services.create_act(product, data['quantity'], data['reason'], data['comment'],
                                  responsible=request.user, warehouse=warehouse)
    except BusinessRuleError as e:
        logger.warning(f"Write-off act refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(WriteOffActSerializer(act).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def act_detail(request, pk):
    return _act_detail(pk)


# Director
@api_view(['GET'])
@permission_classes([IsManager])
def manager_act_list(request):
    return _act_list(request)


@api_view(['GET'])
@permission_classes([IsManager])
def manager_act_detail(request, pk):
    return _act_detail(pk)


@api_view(['POST'])
@permission_classes([IsManager])
def manager_act_approve(request, pk):
    act = get_object_or_404(WriteOffAct, pk=pk)
    try:
        act = services.approve_act(act, user=request.user)
    except BusinessRuleError as e:
        logger.warning(f"Approval of write-off act {act.act_number} refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return _act_detail(act.pk)


@api_view(['POST'])
@permission_classes([IsManager])
def manager_act_reject(request, pk):
    act = get_object_or_404(WriteOffAct, pk=pk)
    serializer = RejectInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        act = services.reject_act(act, serializer.validated_data['director_comment'], user=request.user)
    except BusinessRuleError as e:
        logger.warning(f"Rejection of write-off act {act.act_number} refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return _act_detail(act.pk)


# Accountant
@api_view(['GET'])
@permission_classes([IsAccounter])
def accounter_act_list(request):
    """Approved acts by default"""
    return _act_list(request, [WriteOffActStatus.APPROVED])


@api_view(['GET'])
@permission_classes([IsAccounter])
def accounter_act_detail(request, pk):
    return _act_detail(pk)
