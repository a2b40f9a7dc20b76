import django_filters

from modules.notifications.models import Notification


class NotificationFilter(django_filters.FilterSet):
    level = django_filters.CharFilter(field_name="level", lookup_expr="iexact")
    audience = django_filters.CharFilter(field_name="audience", lookup_expr="iexact")

    class Meta:
        model = Notification
        fields = ["is_read", "level", "audience"]
