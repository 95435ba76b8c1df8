import django_filters
from django.db.models import F, Q
from .models import Product, WarehouseType


class ProductFilter(django_filters.FilterSet):
    """Filter for Product model using django-filter"""

    # Search across name, article and category names
    search = django_filters.CharFilter(method='filter_search', label='Search')

    category = django_filters.NumberFilter(field_name='category_id', lookup_expr='exact')
    global_category = django_filters.NumberFilter(field_name='category__global_category_id', lookup_expr='exact')
    warehouse_type = django_filters.ChoiceFilter(choices=WarehouseType.choices)

    # Stock status filters
    in_stock = django_filters.CharFilter(method='filter_in_stock', label='In Stock')
    awaiting_placement = django_filters.CharFilter(method='filter_awaiting_placement', label='Awaiting Placement')

    class Meta:
        model = Product
        fields = ['search', 'category', 'global_category', 'warehouse_type', 'in_stock', 'awaiting_placement']

    def filter_search(self, queryset, name, value):
        """
        Multi-word search: every word must appear in the name, the article,
        the category or the global category (in any order).
        """
        if not value or not value.strip():
            return queryset
        for word in value.split():
            queryset = queryset.filter(
                Q(name__icontains=word)
                | Q(article__icontains=word)
                | Q(category__name__icontains=word)
                | Q(category__global_category__name__icontains=word)
            )
        return queryset.distinct()

    def filter_in_stock(self, queryset, name, value):
        """true: some units are not reserved; false: nothing available"""
        if value == 'true':
            return queryset.filter(stock_quantity__gt=F('reserved_quantity'))
        if value == 'false':
            return queryset.filter(stock_quantity__lte=F('reserved_quantity'))
        return queryset

    def filter_awaiting_placement(self, queryset, name, value):
        if value == 'true':
            return queryset.filter(quantity_for_stock__gt=0)
        return queryset
