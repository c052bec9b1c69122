import django_filters
from django.db.models import Q

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    purchaser_email = django_filters.CharFilter(
        field_name="purchaser_email", lookup_expr="iexact"
    )
    product_name = django_filters.CharFilter(method="filter_product_name")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(field_name="total_price", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="total_price", lookup_expr="lte")

    class Meta:
        model = Order
        fields = [
            "status",
            "purchaser_email",
            "product_name",
            "start_date",
            "end_date",
            "min_total",
            "max_total",
        ]

    def filter_product_name(self, queryset, name, value):
        """Match single-product orders and carts containing the product."""
        return queryset.filter(
            Q(product_name=value)
            | Q(items__product_name=value)
        ).distinct()
