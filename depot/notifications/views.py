import logging
from django.core.paginator import Paginator
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from depot.core.permissions import IsEmployee
from . import services
from .models import Notification
from .serializers import NotificationSerializer

logger = logging.getLogger('depot.notifications')


@api_view(['GET'])
@permission_classes([IsEmployee])
def notification_list(request):
    """List own visible notifications, newest first, filtered by status and text"""
    status_filter = request.query_params.get('status')
    if status_filter and status_filter not in dict(Notification.STATUS_CHOICES):
        return Response({'error': f'Unknown status: {status_filter}'}, status=status.HTTP_400_BAD_REQUEST)
    queryset = services.notifications_for(
        request.user,
        status=status_filter,
        search=request.query_params.get('search'),
    )

    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', 20))
    except ValueError:
        return Response({'error': 'page and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)
    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)

    serializer = NotificationSerializer(page_obj, many=True)
    return Response({
        'results': serializer.data,
        'count': paginator.count,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
        'unread': services.unread_count(request.user),
    })


@api_view(['GET'])
@permission_classes([IsEmployee])
def notification_unread_count(request):
    return Response({'unread': services.unread_count(request.user)})


@api_view(['POST'])
@permission_classes([IsEmployee])
def notification_mark_read(request, pk):
    notification = get_object_or_404(Notification, pk=pk, recipient=request.user)
    notification.status = Notification.STATUS_READ
    notification.save(update_fields=['status'])
    return Response(NotificationSerializer(notification).data)


@api_view(['POST'])
@permission_classes([IsEmployee])
def notification_mark_all_read(request):
    updated = services.mark_all_as_read(request.user)
    return Response({'updated': updated})


@api_view(['POST'])
@permission_classes([IsEmployee])
def notification_hide(request, pk):
    """Hide a notification from the employee's list"""
    notification = get_object_or_404(Notification, pk=pk, recipient=request.user)
    notification.visible = False
    notification.save(update_fields=['visible'])
    logger.info(f"Notification {pk} hidden by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)
