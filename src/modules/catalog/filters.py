import django_filters

from modules.catalog.models import RiceProduct


class ProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    min_price = django_filters.NumberFilter(field_name="original_price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="original_price", lookup_expr="lte")
    discounted = django_filters.BooleanFilter(method="filter_discounted")

    class Meta:
        model = RiceProduct
        fields = ["name", "category", "min_price", "max_price", "discounted"]

    def filter_discounted(self, queryset, name, value):
        if value:
            return queryset.filter(discount_percentage__gt=0)
        return queryset.filter(discount_percentage=0)
