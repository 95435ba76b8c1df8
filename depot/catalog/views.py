import logging
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from depot.core.permissions import IsEmployee, IsWarehouseManager
from depot.core.utils import create_audit_log, paginated_response_data
from .filters import ProductFilter
from .models import GlobalProductCategory, ProductAttribute, ProductCategory, Product
from .serializers import (
    GlobalProductCategorySerializer, ProductAttributeSerializer, ProductCategorySerializer,
    ProductSerializer, ProductListSerializer
)

logger = logging.getLogger('depot.catalog')


def _product_queryset():
    return Product.objects.select_related('category', 'category__global_category').prefetch_related(
        'attribute_values__attribute'
    )


def _save(serializer, duplicate_message):
    """Save a validated serializer; uniqueness violations become a 400 response"""
    try:
        return serializer.save(), None
    except IntegrityError as e:
        logger.warning(f"Integrity error while saving: {str(e)}")
        return None, Response({'error': duplicate_message}, status=status.HTTP_400_BAD_REQUEST)


def _list_create(request, queryset, serializer_class, duplicate_message):
    if request.method == 'GET':
        return Response(serializer_class(queryset, many=True).data)
    serializer = serializer_class(data=request.data)
    if serializer.is_valid():
        instance, error_response = _save(serializer, duplicate_message)
        if error_response:
            return error_response
        logger.info(f"{instance.__class__.__name__} '{instance}' created by {request.user.username}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _update(request, instance, serializer_class, duplicate_message):
    serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        _, error_response = _save(serializer, duplicate_message)
        if error_response:
            return error_response
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Global category views
@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def global_category_list_create(request):
    """List all global categories or create a new one"""
    return _list_create(
        request, GlobalProductCategory.objects.all(), GlobalProductCategorySerializer,
        'A global category with this name already exists'
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsWarehouseManager])
def global_category_detail(request, pk):
    global_category = get_object_or_404(GlobalProductCategory, pk=pk)

    if request.method == 'GET':
        return Response(GlobalProductCategorySerializer(global_category).data)
    elif request.method in ('PUT', 'PATCH'):
        return _update(request, global_category, GlobalProductCategorySerializer,
                       'A global category with this name already exists')
    else:  # DELETE
        if global_category.categories.exists():
            logger.warning(f"Global category '{global_category}' has subcategories and cannot be deleted")
            return Response({'error': 'Global category has subcategories and cannot be deleted'},
                            status=status.HTTP_400_BAD_REQUEST)
        global_category.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def category_list_create(request):
    """List all product categories or create a new one"""
    queryset = ProductCategory.objects.select_related('global_category').prefetch_related('attributes')
    global_category = request.query_params.get('global_category')
    if global_category:
        queryset = queryset.filter(global_category_id=global_category)
    return _list_create(request, queryset, ProductCategorySerializer,
                        'A category with this name already exists in the global category')


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsWarehouseManager])
def category_detail(request, pk):
    category = get_object_or_404(ProductCategory, pk=pk)

    if request.method == 'GET':
        return Response(ProductCategorySerializer(category).data)
    elif request.method in ('PUT', 'PATCH'):
        return _update(request, category, ProductCategorySerializer,
                       'A category with this name already exists in the global category')
    else:  # DELETE
        try:
            category.delete()
        except ProtectedError:
            logger.warning(f"Category '{category}' has products and cannot be deleted")
            return Response({'error': 'Category has products and cannot be deleted'},
                            status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)


# Attribute views
@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def attribute_list_create(request):
    """List all product attributes or create a new one attached to categories"""
    return _list_create(request, ProductAttribute.objects.prefetch_related('categories'),
                        ProductAttributeSerializer, 'An attribute with this name already exists')


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsWarehouseManager])
def attribute_detail(request, pk):
    attribute = get_object_or_404(ProductAttribute, pk=pk)

    if request.method == 'GET':
        return Response(ProductAttributeSerializer(attribute).data)
    elif request.method in ('PUT', 'PATCH'):
        return _update(request, attribute, ProductAttributeSerializer, 'An attribute with this name already exists')
    else:  # DELETE
        if attribute.values.exists():
            logger.warning(f"Attribute '{attribute.name}' has product values and cannot be deleted")
            return Response({'error': 'Attribute has product values and cannot be deleted'},
                            status=status.HTTP_400_BAD_REQUEST)
        attribute.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Product views
@api_view(['GET'])
@permission_classes([IsEmployee])
def product_list(request):
    """Paginated, filterable product list for any employee"""
    filterset = ProductFilter(request.query_params, queryset=_product_queryset())
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        data = paginated_response_data(request, filterset.qs, ProductListSerializer)
    except ValueError:
        return Response({'error': 'page and limit must be integers'}, status=status.HTTP_400_BAD_REQUEST)
    return Response(data)


@api_view(['GET'])
@permission_classes([IsEmployee])
def product_retrieve(request, pk):
    product = get_object_or_404(_product_queryset(), pk=pk)
    return Response(ProductSerializer(product, context={'request': request}).data)


@api_view(['GET', 'POST'])
@permission_classes([IsWarehouseManager])
def product_list_create(request):
    """List all products or create a new product with its attribute values"""
    if request.method == 'GET':
        filterset = ProductFilter(request.query_params, queryset=_product_queryset())
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = ProductSerializer(filterset.qs, many=True, context={'request': request})
        return Response(serializer.data)

    serializer = ProductSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        logger.warning(f"Product creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    product, error_response = _save(serializer, 'A product with this article already exists')
    if error_response:
        return error_response
    logger.info(f"Product '{product.article}' created by {request.user.username}")
    create_audit_log(
        request=request,
        action='create',
        model_name='Product',
        object_id=str(product.id),
        object_reference=product.article,
        changes={'name': product.name, 'article': product.article, 'category': product.category_id}
    )
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsWarehouseManager])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = get_object_or_404(_product_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(ProductSerializer(product, context={'request': request}).data)
    elif request.method in ('PUT', 'PATCH'):
        old_data = {'name': product.name, 'article': product.article, 'category': product.category_id}
        serializer = ProductSerializer(product, data=request.data, partial=request.method == 'PATCH',
                                       context={'request': request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        _, error_response = _save(serializer, 'A product with this article already exists')
        if error_response:
            return error_response
        new_data = {'name': product.name, 'article': product.article, 'category': product.category_id}
        changes = {k: {'old': old_data[k], 'new': new_data[k]} for k in old_data if old_data[k] != new_data[k]}
        if changes:
            create_audit_log(
                request=request,
                action='update',
                model_name='Product',
                object_id=str(product.id),
                object_reference=product.article,
                changes=changes
            )
        return Response(serializer.data)
    else:  # DELETE
        if product.stock_quantity or product.reserved_quantity:
            return Response({'error': 'Product still has stock and cannot be deleted'},
                            status=status.HTTP_400_BAD_REQUEST)
        product_id, article = str(product.id), product.article
        try:
            product.delete()
        except ProtectedError:
            logger.warning(f"Product {article} is referenced by documents and cannot be deleted")
            return Response({'error': 'Product is used in orders, requests or acts and cannot be deleted'},
                            status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(
            request=request,
            action='delete',
            model_name='Product',
            object_id=product_id,
            object_reference=article,
            changes={'article': article}
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
