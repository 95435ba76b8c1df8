"""
URL configuration for the depot project.

Every app mounts its routes under ``api/v1/``. Employee routes start with
``employee/`` and visitor routes with ``visitor/``.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Depot Administration"
admin.site.site_title = "Depot Admin Portal"
admin.site.index_title = "Warehouse and logistics administration"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('depot.core.urls')),
    path('api/v1/', include('depot.notifications.urls')),
    path('api/v1/', include('depot.parties.urls')),
    path('api/v1/', include('depot.catalog.urls')),
    path('api/v1/', include('depot.locations.urls')),
    path('api/v1/', include('depot.orders.urls')),
    path('api/v1/', include('depot.delivery.urls')),
    path('api/v1/', include('depot.purchasing.urls')),
    path('api/v1/', include('depot.inventory.urls')),
    path('api/v1/', include('depot.equipment.urls')),
    path('api/v1/', include('depot.visitors.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
