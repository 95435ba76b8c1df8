import logging
from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from depot.core.exceptions import BusinessRuleError
from depot.core.permissions import IsManager, IsWarehouseManager, IsWarehouseWorker, IsAccounter, IsCourier
from depot.orders.models import ClientOrder
from . import services
from .models import Vehicle, DeliveryTask, DeliveryTaskStatus, TTN, AcceptanceAct
from .serializers import (
    VehicleSerializer, DeliveryTaskSerializer, DeliveryTaskCreateSerializer, TTNSerializer,
    AcceptanceActSerializer, DocumentInputSerializer, CompleteDeliverySerializer
)

logger = logging.getLogger('depot.delivery')
User = get_user_model()


def _refused(e, context):
    logger.warning(f"{context} refused: {e.message}")
    return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)


def _statuses_param(request, default=None):
    value = request.query_params.get('status')
    if not value:
        return default
    statuses = value.split(',')
    unknown = [s for s in statuses if s not in DeliveryTaskStatus.values]
    if unknown:
        raise BusinessRuleError(f'Unknown status: {unknown[0]}', field='status')
    return statuses


def _task_list_response(request, default_statuses=None, driver=None):
    try:
        statuses = _statuses_param(request, default_statuses)
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    if driver is not None:
        tasks = services.tasks_by_driver(driver, statuses)
    elif statuses:
        tasks = services.tasks_by_statuses(statuses)
    else:
        tasks = services.all_tasks()
    return Response(DeliveryTaskSerializer(tasks, many=True).data)


def _task_response(task):
    return Response(DeliveryTaskSerializer(services.all_tasks().get(pk=task.pk)).data)


def _document_data(request):
    serializer = DocumentInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# Vehicles (manager)
@api_view(['GET', 'POST'])
@permission_classes([IsManager])
def vehicle_list_create(request):
    """List all vehicles or register a new one"""
    if request.method == 'GET':
        vehicles = Vehicle.objects.all()
        status_filter = request.query_params.get('status')
        if status_filter:
            vehicles = vehicles.filter(status=status_filter)
        return Response(VehicleSerializer(vehicles, many=True).data)

    serializer = VehicleSerializer(data=request.data)
    if serializer.is_valid():
        try:
            vehicle = serializer.save()
        except IntegrityError as e:
            logger.error(f"IntegrityError creating vehicle: {str(e)}", exc_info=True)
            return Response({'error': 'A vehicle with this registration number already exists'},
                            status=status.HTTP_400_BAD_REQUEST)
        logger.info(f"Vehicle {vehicle.get_full_name()} registered by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsManager])
def vehicle_detail(request, pk):
    vehicle = get_object_or_404(Vehicle, pk=pk)

    if request.method == 'GET':
        return Response(VehicleSerializer(vehicle).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = VehicleSerializer(vehicle, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            try:
                serializer.save()
            except IntegrityError:
                return Response({'error': 'A vehicle with this registration number already exists'},
                                status=status.HTTP_400_BAD_REQUEST)
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        try:
            vehicle.delete()
        except ProtectedError:
            logger.warning(f"Vehicle {vehicle.registration_number} has delivery tasks and cannot be deleted")
            return Response({'error': 'Vehicle has delivery tasks and cannot be deleted'},
                            status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


# Warehouse manager
@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def task_list_create(request):
    """List delivery tasks or assign a READY order to a courier"""
    if request.method == 'GET':
        return _task_list_response(request)

    serializer = DeliveryTaskCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    order = get_object_or_404(ClientOrder, pk=data['client_order'])
    driver = get_object_or_404(User, pk=data['driver'])
    vehicle = get_object_or_404(Vehicle, pk=data['vehicle'])
    try:
        task = services.create_task(
            order, driver, vehicle,
            planned_start=data['planned_start_time'],
            planned_end=data['planned_end_time'],
            route_points=data['route_points'],
            user=request.user,
        )
    except BusinessRuleError as e:
        return _refused(e, f"Delivery task for order {order.order_number}")
    return Response(DeliveryTaskSerializer(services.all_tasks().get(pk=task.pk)).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def task_detail(request, pk):
    task = get_object_or_404(services.all_tasks(), pk=pk)
    return Response(DeliveryTaskSerializer(task).data)


@api_view(['POST'])
@permission_classes([IsWarehouseManager])
def task_cancel(request, pk):
    task = get_object_or_404(DeliveryTask, pk=pk)
    try:
        task = services.cancel_task(task, user=request.user)
    except BusinessRuleError as e:
        return _refused(e, f"Cancellation of task {pk}")
    return _task_response(task)


@api_view(['GET'])
@permission_classes([IsWarehouseManager])
def available_resources(request):
    """Active couriers and available vehicles for a new task"""
    drivers = [
        {'id': driver.id, 'full_name': driver.get_full_name(), 'phone': driver.phone}
        for driver in services.available_drivers()
    ]
    return Response({
        'drivers': drivers,
        'vehicles': VehicleSerializer(services.available_vehicles(), many=True).data,
    })


@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def order_documents(request, order_pk):
    """TTN and acceptance act of an order; POST issues whichever is missing"""
    order = get_object_or_404(ClientOrder, pk=order_pk)
    if request.method == 'POST':
        try:
            services.create_documents_for_order(order)
        except BusinessRuleError as e:
            return _refused(e, f"Documents for order {order.order_number}")
    ttn = TTN.objects.filter(delivery_task__client_order=order).first()
    act = AcceptanceAct.objects.filter(client_order=order).first()
    return Response({
        'ttn': TTNSerializer(ttn).data if ttn else None,
        'acceptance_act': AcceptanceActSerializer(act).data if act else None,
    })


@api_view(['PUT'])
@permission_classes([IsWarehouseManager])
def ttn_update(request, pk):
    ttn = get_object_or_404(TTN, pk=pk)
    data = _document_data(request)
    ttn = services.update_ttn(ttn, data['cargo_description'], data['total_weight'], data['total_volume'], data['comment'])
    return Response(TTNSerializer(ttn).data)


@api_view(['PUT'])
@permission_classes([IsWarehouseManager])
def acceptance_act_update(request, pk):
    act = get_object_or_404(AcceptanceAct, pk=pk)
    act = services.update_acceptance_act(act, _document_data(request)['comment'])
    return Response(AcceptanceActSerializer(act).data)


# Warehouse worker
@api_view(['GET'])
@permission_classes([IsWarehouseWorker])
def task_list_for_loading(request):
    return _task_list_response(request, [DeliveryTaskStatus.PENDING, DeliveryTaskStatus.LOADING])


@api_view(['POST'])
@permission_classes([IsWarehouseWorker])
def task_start_loading(request, pk):
    task = get_object_or_404(DeliveryTask, pk=pk)
    try:
        task = services.start_loading(task, user=request.user)
    except BusinessRuleError as e:
        return _refused(e, f"Loading of task {pk}")
    return _task_response(task)


@api_view(['POST'])
@permission_classes([IsWarehouseWorker])
def task_complete_loading(request, pk):
    task = get_object_or_404(DeliveryTask, pk=pk)
    try:
        task = services.complete_loading(task, user=request.user)
    except BusinessRuleError as e:
        return _refused(e, f"Completion of loading for task {pk}")
    return _task_response(task)


# Accountant
@api_view(['GET'])
@permission_classes([IsAccounter])
def task_list_for_accounting(request):
    return _task_list_response(request)


@api_view(['POST'])
@permission_classes([IsAccounter])
def task_create_ttn(request, pk):
    task = get_object_or_404(DeliveryTask, pk=pk)
    data = _document_data(request)
    try:
        ttn = services.create_ttn(task, data['cargo_description'], data['total_weight'],
                                  data['total_volume'], data['comment'])
    except BusinessRuleError as e:
        return _refused(e, f"TTN for task {pk}")
    return Response(TTNSerializer(ttn).data, status=status.HTTP_201_CREATED)


# Courier
def _own_task(request, pk):
    return get_object_or_404(DeliveryTask, pk=pk, driver=request.user)


@api_view(['GET'])
@permission_classes([IsCourier])
def courier_task_list(request):
    """Tasks assigned to the requesting courier"""
    return _task_list_response(request, driver=request.user)


@api_view(['GET'])
@permission_classes([IsCourier])
def courier_task_detail(request, pk):
    task = get_object_or_404(services.all_tasks(), pk=pk, driver=request.user)
    ttn = TTN.objects.filter(delivery_task=task).first()
    act = AcceptanceAct.objects.filter(client_order=task.client_order).first()
    data = DeliveryTaskSerializer(task).data
    data['ttn'] = TTNSerializer(ttn).data if ttn else None
    data['acceptance_act'] = AcceptanceActSerializer(act).data if act else None
    return Response(data)


@api_view(['POST'])
@permission_classes([IsCourier])
def courier_task_documents(request, pk):
    """Prepare the TTN and the acceptance act before leaving"""
    task = _own_task(request, pk)
    data = _document_data(request)
    ttn = services.create_or_update_ttn(task, data['cargo_description'], data['total_weight'],
                                        data['total_volume'], data['comment'])
    act = services.create_or_update_acceptance_act(task, request.data.get('act_comment', ''))
    return Response({'ttn': TTNSerializer(ttn).data, 'acceptance_act': AcceptanceActSerializer(act).data})


@api_view(['POST'])
@permission_classes([IsCourier])
def courier_start_delivery(request, pk):
    task = _own_task(request, pk)
    try:
        start_mileage = int(request.data.get('start_mileage'))
    except (TypeError, ValueError):
        return Response({'start_mileage': ['A valid integer is required.']}, status=status.HTTP_400_BAD_REQUEST)
    try:
        task = services.start_delivery(task, start_mileage, user=request.user)
    except BusinessRuleError as e:
        return _refused(e, f"Start of delivery for task {pk}")
    return _task_response(task)


@api_view(['POST'])
@permission_classes([IsCourier])
def courier_update_location(request, pk):
    task = _own_task(request, pk)
    try:
        latitude = float(request.data.get('latitude'))
        longitude = float(request.data.get('longitude'))
    except (TypeError, ValueError):
        return Response({'error': 'latitude and longitude must be numbers'}, status=status.HTTP_400_BAD_REQUEST)
    try:
        services.update_location(task, latitude, longitude)
    except BusinessRuleError as e:
        return Response(e.as_response_data(), status=status.HTTP_400_BAD_REQUEST)
    return Response({'latitude': latitude, 'longitude': longitude})


@api_view(['POST'])
@permission_classes([IsCourier])
def courier_route_point_reached(request, pk, point_pk):
    task = _own_task(request, pk)
    try:
        services.mark_route_point_reached(task, point_pk)
    except BusinessRuleError as e:
        return _refused(e, f"Route point {point_pk} of task {pk}")
    return _task_response(task)


@api_view(['POST'])
@permission_classes([IsCourier])
def courier_complete_delivery(request, pk):
    task = _own_task(request, pk)
    serializer = CompleteDeliverySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        task = services.complete_delivery(
            task, data['end_mileage'],
            representative=data['client_representative'],
            comment=data['comment'],
            user=request.user,
        )
    except BusinessRuleError as e:
        return _refused(e, f"Completion of delivery for task {pk}")
    return _task_response(task)
