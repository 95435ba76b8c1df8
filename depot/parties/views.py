import logging
from django.db import IntegrityError
from django.db.models import Q, ProtectedError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from depot.core.permissions import IsEmployee, IsManager
from .models import Client, Supplier
from .serializers import ClientSerializer, SupplierSerializer

logger = logging.getLogger('depot.parties')


def _save_or_400(serializer, label):
    """Save a validated serializer, converting uniqueness races into a 400 response"""
    try:
        instance = serializer.save()
    except IntegrityError as e:
        logger.error(f"IntegrityError saving {label}: {str(e)}", exc_info=True)
        return None, Response({'error': f'A {label} with this INN already exists'}, status=status.HTTP_400_BAD_REQUEST)
    return instance, None


# Client views
def _client_queryset(request):
    queryset = Client.objects.all()
    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(Q(organization_name__icontains=search) | Q(inn__icontains=search))
    return queryset


@api_view(['GET'])
@permission_classes([IsEmployee])
def client_list(request):
    """Read-only client list for any employee"""
    return Response(ClientSerializer(_client_queryset(request), many=True).data)


@api_view(['GET', 'POST'])
@permission_classes([IsManager])
def client_list_create(request):
    """List all clients or create a new client"""
    if request.method == 'GET':
        return Response(ClientSerializer(_client_queryset(request), many=True).data)
    logger.info(f"User {request.user.username} creating client with data: {request.data}")
    serializer = ClientSerializer(data=request.data)
    if serializer.is_valid():
        client, error_response = _save_or_400(serializer, 'client')
        if error_response:
            return error_response
        logger.info(f"Client '{client}' created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    logger.warning(f"Client creation validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsManager])
def client_detail(request, pk):
    """Retrieve, update or delete a client"""
    client = get_object_or_404(Client, pk=pk)

    if request.method == 'GET':
        return Response(ClientSerializer(client).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ClientSerializer(client, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            _, error_response = _save_or_400(serializer, 'client')
            if error_response:
                return error_response
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            client.delete()
        except ProtectedError:
            logger.warning(f"Client {pk} has orders and cannot be deleted")
            return Response({'error': 'Client has orders and cannot be deleted'}, status=status.HTTP_400_BAD_REQUEST)
        logger.info(f"Client {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)


# Supplier views
def _supplier_queryset(request):
    queryset = Supplier.objects.all()
    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(Q(name__icontains=search) | Q(inn__icontains=search))
    return queryset


@api_view(['GET'])
@permission_classes([IsEmployee])
def supplier_list(request):
    """Read-only supplier list for any employee"""
    return Response(SupplierSerializer(_supplier_queryset(request), many=True).data)


@api_view(['GET', 'POST'])
@permission_classes([IsManager])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        return Response(SupplierSerializer(_supplier_queryset(request), many=True).data)
    serializer = SupplierSerializer(data=request.data)
    if serializer.is_valid():
        supplier, error_response = _save_or_400(serializer, 'supplier')
        if error_response:
            return error_response
        logger.info(f"Supplier '{supplier}' created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    logger.warning(f"Supplier creation validation failed: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsManager])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        return Response(SupplierSerializer(supplier).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            _, error_response = _save_or_400(serializer, 'supplier')
            if error_response:
                return error_response
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            supplier.delete()
        except ProtectedError:
            logger.warning(f"Supplier {pk} is referenced by requests or deliveries")
            return Response({'error': 'Supplier has requests or deliveries and cannot be deleted'}, status=status.HTTP_400_BAD_REQUEST)
        logger.info(f"Supplier {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)
