import logging
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from depot.core.exceptions import BusinessRuleError
from depot.core.permissions import IsEmployee, IsManager, IsWarehouseManager, IsWarehouseWorker
from depot.core.utils import paginated_response_data
from depot.parties.models import Client
from . import services
from .models import ClientOrder, ClientOrderStatus
from .serializers import ClientOrderSerializer, ClientOrderListSerializer, ClientOrderInputSerializer

logger = logging.getLogger('depot.orders')


def _order_queryset():
    return ClientOrder.objects.select_related('client', 'responsible_employee').prefetch_related(
        'ordered_products__product'
    )


def _filtered_orders(request, default_statuses=None):
    """Orders filtered by comma separated ``status`` and by ``client``"""
    queryset = _order_queryset()
    statuses = request.query_params.get('status')
    statuses = statuses.split(',') if statuses else default_statuses
    if statuses:
        unknown = [s for s in statuses if s not in ClientOrderStatus.values]
        if unknown:
            raise BusinessRuleError(f'Unknown status: {unknown[0]}', field='status')
        queryset = queryset.filter(status__in=statuses)
    client = request.query_params.get('client')
    if client:
        queryset = queryset.filter(client_id=client)
    return queryset.order_by('-order_date')


def _list_response(request, default_statuses=None):
    try:
        queryset = _filtered_orders(request, default_statuses)
        return Response(paginated_response_data(request, queryset, ClientOrderListSerializer))
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    except ValueError:
        return Response({'error': 'page and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)


def _transition(request, pk, action):
    """Run a lifecycle service on an order and return the updated order"""
    order = get_object_or_404(ClientOrder, pk=pk)
    try:
        order = action(order, user=request.user)
    except BusinessRuleError as e:
        logger.warning(f"{action.__name__} refused for order {order.order_number}: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"Unexpected error in {action.__name__} for order {order.order_number}: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(ClientOrderSerializer(_order_queryset().get(pk=order.pk)).data)


@api_view(['GET'])
@permission_classes([IsEmployee])
def order_list(request):
    """Orders visible to any employee, newest first"""
    return _list_response(request)


@api_view(['GET'])
@permission_classes([IsEmployee])
def order_detail(request, pk):
    order = get_object_or_404(_order_queryset(), pk=pk)
    return Response(ClientOrderSerializer(order).data)


# Manager
@api_view(['POST'])
@permission_classes([IsManager])
def order_create(request):
    serializer = ClientOrderInputSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    client = get_object_or_404(Client, pk=data['client'])
    try:
        order = services.create_order(
            client=client,
            delivery_date=data['delivery_date'],
            comment=data['comment'],
            items=data['items'],
            responsible=request.user,
            contract_file=data['contract_file'],
        )
    except BusinessRuleError as e:
        logger.warning(f"Order creation refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(ClientOrderSerializer(_order_queryset().get(pk=order.pk)).data, status=status.HTTP_201_CREATED)


@api_view(['PUT'])
@permission_classes([IsManager])
def order_update(request, pk):
    order = get_object_or_404(ClientOrder, pk=pk)
    serializer = ClientOrderInputSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        order = services.update_order(order, data['delivery_date'], data['comment'], data['items'])
    except BusinessRuleError as e:
        logger.warning(f"Order {order.order_number} update refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(ClientOrderSerializer(_order_queryset().get(pk=order.pk)).data)


@api_view(['POST'])
@permission_classes([IsManager])
def order_confirm(request, pk):
    return _transition(request, pk, services.confirm_order)


@api_view(['POST'])
@permission_classes([IsManager])
def order_cancel(request, pk):
    return _transition(request, pk, services.cancel_order)


@api_view(['GET'])
@permission_classes([IsManager])
def order_product_deficit(request):
    """Products short for NEW and CONFIRMED orders"""
    return Response(services.product_deficit())


# Warehouse manager
@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def order_list_for_reservation(request):
    return _list_response(request, [ClientOrderStatus.CONFIRMED])


@api_view(['POST'])
@permission_classes([IsWarehouseManager])
def order_reserve(request, pk):
    return _transition(request, pk, services.reserve_products)


# Warehouse worker
@api_view(['GET'])
@permission_classes([IsWarehouseWorker])
def order_list_for_assembly(request):
    return _list_response(request, [ClientOrderStatus.RESERVED, ClientOrderStatus.IN_PROGRESS])


@api_view(['POST'])
@permission_classes([IsWarehouseWorker])
def order_start_assembly(request, pk):
    return _transition(request, pk, services.start_assembly)


@api_view(['POST'])
@permission_classes([IsWarehouseWorker])
def order_complete_assembly(request, pk):
    return _transition(request, pk, services.complete_assembly)
