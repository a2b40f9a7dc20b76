"""Unit tests for manual item status changes and parent recomputation."""

import pytest

from modules.orders.constants import BULK_STATUS_UPDATE_NOTE, ItemStatus
from modules.orders.exceptions import InvalidItemStatus, OrderItemNotFound, OrderNotFound
from modules.orders.models import OrderStatusLog
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderItemStatusService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return OrderItemStatusService(order_repository=OrderDjangoRepository())


class TestUpdateItemStatus:
    def test_change_is_logged_with_user_and_note(self, service, make_item, user):
        item = make_item(status=ItemStatus.PROCESSING)

        service.update_item_status(
            item.id, ItemStatus.CREDENTIALS_SENT, note="sent by mail", user=user
        )

        entry = OrderStatusLog.objects.get(item=item)
        assert entry.old_status == ItemStatus.PROCESSING
        assert entry.new_status == ItemStatus.CREDENTIALS_SENT
        assert entry.note == "sent by mail"
        assert entry.changed_by == user

    def test_same_status_is_not_logged(self, service, make_item):
        item = make_item(status=ItemStatus.PROCESSING)

        service.update_item_status(item.id, ItemStatus.PROCESSING)

        assert OrderStatusLog.objects.count() == 0

    def test_parent_is_recomputed(self, service, make_order, make_item):
        order = make_order()
        item = make_item(order=order, status=ItemStatus.PROCESSING)
        make_item(order=order, status=ItemStatus.COMPLETED)

        service.update_item_status(item.id, ItemStatus.ON_HOLD_INTERNAL)

        order.refresh_from_db()
        assert order.status == ItemStatus.ON_HOLD_INTERNAL

    def test_unknown_status_is_rejected(self, service, make_item):
        item = make_item()
        with pytest.raises(InvalidItemStatus):
            service.update_item_status(item.id, "teleported")

    def test_missing_item_raises(self, service):
        with pytest.raises(OrderItemNotFound):
            service.update_item_status("0190a1d2-0000-7000-8000-000000000000", "new")

    def test_trashed_item_raises(self, service, make_item):
        item = make_item()
        item.delete()
        with pytest.raises(OrderItemNotFound):
            service.update_item_status(item.id, ItemStatus.COMPLETED)


class TestBulkUpdate:
    def test_updates_every_alive_item(self, service, make_order, make_item):
        first, second = make_order(), make_order()
        make_item(order=first, status=ItemStatus.NEW)
        make_item(order=first, status=ItemStatus.COMPLETED)
        make_item(order=second, status=ItemStatus.NEW)

        updated = service.bulk_update_orders_status(
            [first.id, second.id], ItemStatus.COMPLETED
        )

        first.refresh_from_db()
        second.refresh_from_db()
        assert updated == 3
        assert first.status == ItemStatus.COMPLETED
        assert second.status == ItemStatus.COMPLETED
        assert OrderStatusLog.objects.count() == 2
        assert set(OrderStatusLog.objects.values_list("note", flat=True)) == {
            BULK_STATUS_UPDATE_NOTE
        }

    def test_empty_selection_is_rejected(self, service):
        with pytest.raises(InvalidItemStatus):
            service.bulk_update_orders_status([], ItemStatus.COMPLETED)

    def test_orders_without_items_raise(self, service, make_order):
        order = make_order()
        with pytest.raises(OrderNotFound):
            service.bulk_update_orders_status([order.id], ItemStatus.COMPLETED)


class TestRecompute:
    def test_no_alive_items_leaves_status(self, service, make_order):
        order = make_order(status=ItemStatus.PROCESSING)

        assert service.recompute_order_status(order.id) is None

        order.refresh_from_db()
        assert order.status == ItemStatus.PROCESSING

    def test_get_order_unknown_raises(self, service):
        with pytest.raises(OrderNotFound):
            service.get_order("not-a-uuid")
