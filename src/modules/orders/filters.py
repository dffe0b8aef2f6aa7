import django_filters

from modules.orders.models import SalesOrder


class OrderFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="customer_name", lookup_expr="icontains")
    email = django_filters.CharFilter(field_name="email", lookup_expr="icontains")
    mobileNumber = django_filters.CharFilter(
        field_name="mobile_number", lookup_expr="icontains"
    )
    status = django_filters.CharFilter(field_name="status", lookup_expr="exact")
    orderDateFrom = django_filters.DateFilter(field_name="order_date", lookup_expr="gte")
    orderDateTo = django_filters.DateFilter(field_name="order_date", lookup_expr="lte")

    class Meta:
        model = SalesOrder
        fields = [
            "name",
            "email",
            "mobileNumber",
            "status",
            "orderDateFrom",
            "orderDateTo",
        ]
