import logging
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from depot.core.exceptions import BusinessRuleError
from depot.core.permissions import IsManager, IsWarehouseManager, IsAccounter
from depot.parties.models import Supplier
from . import services
from .models import RequestForDelivery, RequestStatus
from .serializers import (
    RequestForDeliverySerializer, RequestInputSerializer, CommentInputSerializer,
    DeliverySerializer, DeliveryInputSerializer
)

logger = logging.getLogger('depot.purchasing')


def _request_response(request_for_delivery, status_code=status.HTTP_200_OK):
    instance = services.requests_by_status().get(pk=request_for_delivery.pk)
    return Response(RequestForDeliverySerializer(instance).data, status=status_code)


def _request_list(request, default_statuses=None):
    value = request.query_params.get('status')
    statuses = value.split(',') if value else default_statuses
    if statuses:
        unknown = [s for s in statuses if s not in RequestStatus.values]
        if unknown:
            return Response({'error': f'Unknown status: {unknown[0]}', 'field': 'status'},
                            status=status.HTTP_400_BAD_REQUEST)
    queryset = services.requests_by_status(statuses)
    return Response(RequestForDeliverySerializer(queryset, many=True).data)


def _comment_action(request, pk, action):
    """Run an approve/reject/resubmit service that takes a comment"""
    request_for_delivery = get_object_or_404(RequestForDelivery, pk=pk)
    serializer = CommentInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        request_for_delivery = action(request_for_delivery, serializer.validated_data['comment'], request.user)
    except BusinessRuleError as e:
        logger.warning(f"{action.__name__} refused for request #{pk}: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return _request_response(request_for_delivery)


def _plain_action(request, pk, action):
    request_for_delivery = get_object_or_404(RequestForDelivery, pk=pk)
    try:
        request_for_delivery = action(request_for_delivery, user=request.user)
    except BusinessRuleError as e:
        logger.warning(f"{action.__name__} refused for request #{pk}: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return _request_response(request_for_delivery)


# Warehouse manager
@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def request_list_create(request):
    """List requests for delivery or create a DRAFT one"""
    if request.method == 'GET':
        return _request_list(request)

    serializer = RequestInputSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    supplier = get_object_or_404(Supplier, pk=serializer.validated_data['supplier'])
    try:
        request_for_delivery = services.create_request(
            supplier, serializer.validated_data['requested_products'], user=request.user
        )
    except BusinessRuleError as e:
        logger.warning(f"Request creation refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return _request_response(request_for_delivery, status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsWarehouseManager])
def request_detail(request, pk):
    request_for_delivery = get_object_or_404(services.requests_by_status(), pk=pk)

    if request.method == 'GET':
        return Response(RequestForDeliverySerializer(request_for_delivery).data)
    elif request.method == 'PUT':
        serializer = RequestInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        supplier = get_object_or_404(Supplier, pk=serializer.validated_data['supplier'])
        try:
            request_for_delivery = services.update_request(
                request_for_delivery, supplier, serializer.validated_data['requested_products']
            )
        except BusinessRuleError as e:
            logger.warning(f"Update of request #{pk} refused: {e.message}")
            return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
        return _request_response(request_for_delivery)
    else:  # DELETE
        try:
            services.delete_request(request_for_delivery)
        except BusinessRuleError as e:
            return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsWarehouseManager])
def request_submit(request, pk):
    return _plain_action(request, pk, services.submit_request)


@api_view(['POST'])
@permission_classes([IsWarehouseManager])
def request_resubmit(request, pk):
    return _comment_action(request, pk, services.resubmit_request)


@api_view(['POST'])
@permission_classes([IsWarehouseManager])
def request_cancel(request, pk):
    return _plain_action(request, pk, services.cancel_request)


@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def delivery_list_create(request):
    """Received deliveries; POST accepts goods for an APPROVED request"""
    if request.method == 'GET':
        return Response(DeliverySerializer(services.all_deliveries(), many=True).data)

    serializer = DeliveryInputSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    request_for_delivery = get_object_or_404(RequestForDelivery, pk=data['request'])
    try:
        delivery = services.create_delivery_from_request(
            request_for_delivery, data['supplies'], data['delivery_date'], user=request.user
        )
    except BusinessRuleError as e:
        logger.warning(f"Delivery for request #{request_for_delivery.pk} refused: {e.message}")
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response(DeliverySerializer(services.all_deliveries().get(pk=delivery.pk)).data,
                    status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def delivery_detail(request, pk):
    delivery = get_object_or_404(services.all_deliveries(), pk=pk)
    return Response(DeliverySerializer(delivery).data)


# Director
@api_view(['GET'])
@permission_classes([IsManager])
def manager_request_list(request):
    return _request_list(request)


@api_view(['GET'])
@permission_classes([IsManager])
def manager_request_detail(request, pk):
    return Response(RequestForDeliverySerializer(get_object_or_404(services.requests_by_status(), pk=pk)).data)


@api_view(['POST'])
@permission_classes([IsManager])
def manager_request_approve(request, pk):
    return _comment_action(request, pk, services.director_approve)


@api_view(['POST'])
@permission_classes([IsManager])
def manager_request_reject(request, pk):
    return _comment_action(request, pk, services.director_reject)


# Accountant
@api_view(['GET'])
@permission_classes([IsAccounter])
def accounter_request_list(request):
    return _request_list(request)


@api_view(['GET'])
@permission_classes([IsAccounter])
def accounter_request_detail(request, pk):
    return Response(RequestForDeliverySerializer(get_object_or_404(services.requests_by_status(), pk=pk)).data)


@api_view(['POST'])
@permission_classes([IsAccounter])
def accounter_request_approve(request, pk):
    return _comment_action(request, pk, services.accountant_approve)


@api_view(['POST'])
@permission_classes([IsAccounter])
def accounter_request_reject(request, pk):
    return _comment_action(request, pk, services.accountant_reject)
