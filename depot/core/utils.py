"""Utility functions for audit logging and document numbering"""
import logging
import random
from django.utils import timezone
from .models import AuditLog

logger = logging.getLogger('depot.core')


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, status_change, stock_reserve, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_reference: Document number (order number, act number, TTN number)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_reference=object_reference,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Audit logging never fails the main operation
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def log_status_change(document, old_status, new_status, user=None, request=None):
    """Record a document status transition in the audit log"""
    reference = (getattr(document, 'order_number', None)
                 or getattr(document, 'act_number', None)
                 or getattr(document, 'ttn_number', None))
    return create_audit_log(
        request=request,
        user=user,
        action='status_change',
        model_name=document.__class__.__name__,
        object_id=document.pk,
        object_reference=reference,
        changes={'from': old_status, 'to': new_status},
    )


def generate_document_number(prefix, model, field):
    """
    Generate a unique document number PREFIX-YYYYMMDD-NNNN.

    NNNN is random in 1000..9999 and regenerated until no row of
    ``model`` uses it in ``field``.
    """
    date_part = timezone.localdate().strftime('%Y%m%d')
    while True:
        number = f"{prefix}-{date_part}-{random.randint(1000, 9999)}"
        if not model.objects.filter(**{field: number}).exists():
            return number


def paginated_response_data(request, queryset, serializer_class, default_limit=50, context=None):
    """
    Paginate ``queryset`` from ``page``/``limit`` query params and serialize the page.

    Raises ValueError when page or limit are not integers.
    """
    from django.core.paginator import Paginator
    page = int(request.query_params.get('page', 1))
    limit = int(request.query_params.get('limit', default_limit))
    paginator = Paginator(queryset, max(limit, 1))
    page_obj = paginator.get_page(page)
    serializer = serializer_class(page_obj, many=True, context=context or {'request': request})
    return {
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    }
