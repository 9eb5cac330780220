# tests/test_order_service.py
import dataclasses
import threading
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from storefront.data.catalog import Product
from storefront.domain.entities import CartLine, OrderStatus
from storefront.domain.exceptions import StoreDisposedError
from storefront.services.cart_service import CartStore
from storefront.services.order_service import OrderStore
from storefront.tasks.scheduler import ManualScheduler

START = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_product(product_id: int, price: int) -> Product:
    return Product(
        id=product_id,
        name=f"Product {product_id}",
        price=price,
        image_url="",
        description="",
        category="Clothing",
    )


class TestOrderStore(unittest.TestCase):

    def setUp(self):
        self.scheduler = ManualScheduler(start=START)
        self.orders = OrderStore(self.scheduler, processing_duration=10, shipped_duration=10)
        self.cart = CartStore()
        self.listener = Mock()
        self.orders.subscribe(self.listener)
        self.product_a = make_product(1, 1000)
        self.product_b = make_product(2, 1500)

    def place_from_cart(self):
        return self.orders.place(self.cart.items(), self.cart.total_price())

    def test_end_to_end_checkout(self):
        """
        Scenariusz: (A, M, 1) + (B, L, 2) -> zamowienie 4000 z 2 liniami,
        wyczyszczenie koszyka nie zmienia zamowienia.
        """
        # ARRANGE
        self.cart.add_item(self.product_a, "M")
        self.cart.add_item(self.product_b, "L")
        self.cart.add_item(self.product_b, "L")
        self.assertEqual(self.cart.total_price(), 4000)
        self.assertEqual(self.cart.total_count(), 3)

        # ACT
        order = self.place_from_cart()
        self.cart.clear()

        # ASSERT
        self.assertEqual(order.total_price, 4000)
        self.assertEqual(len(order.lines), 2)
        self.assertEqual(order.status, OrderStatus.PROCESSING)
        self.assertIsNone(order.shipped_at)
        self.assertIsNone(order.delivered_at)
        self.assertEqual(order.created_at, START)

        stored = self.orders.get(order.id)
        self.assertEqual(stored.total_price, 4000)
        self.assertEqual(len(stored.lines), 2)
        self.listener.assert_called_once_with()

    def test_snapshot_unaffected_by_later_cart_mutation(self):
        self.cart.add_item(self.product_a, "M")
        self.cart.add_item(self.product_a, "M")

        order = self.place_from_cart()
        self.cart.increment(self.cart.find(1, "M"))

        self.assertEqual(self.cart.find(1, "M").quantity, 3)
        self.assertEqual(self.orders.get(order.id).lines[0].quantity, 2)
        self.assertEqual(self.orders.get(order.id).total_price, 2000)

    def test_total_computed_from_snapshot_when_omitted(self):
        lines = [CartLine(self.product_a, "M", 2), CartLine(self.product_b, "S", 1)]

        order = self.orders.place(lines)

        self.assertEqual(order.total_price, 3500)
        self.assertEqual(order.item_count, 3)

    def test_orders_most_recent_first(self):
        self.cart.add_item(self.product_a, "M")
        first = self.place_from_cart()
        second = self.place_from_cart()

        self.assertEqual([o.id for o in self.orders.orders()], [second.id, first.id])
        self.assertEqual(self.orders.count(), 2)

    def test_ids_unique_within_same_millisecond(self):
        ids = {self.orders.place([CartLine(self.product_a, "M")]).id for _ in range(5)}

        self.assertEqual(len(ids), 5)
        self.assertTrue(all(order_id.startswith("ORD-") for order_id in ids))

    def test_status_progression_timing(self):
        """
        Scenariusz: PROCESSING do 10s, SHIPPED od 10s, DELIVERED od 20s, bez cofania.
        """
        order = self.orders.place([CartLine(self.product_a, "M")])

        self.scheduler.advance(9.5)
        self.assertEqual(self.orders.get(order.id).status, OrderStatus.PROCESSING)

        self.scheduler.advance(0.5)
        shipped = self.orders.get(order.id)
        self.assertEqual(shipped.status, OrderStatus.SHIPPED)
        self.assertEqual(shipped.shipped_at, START + timedelta(seconds=10))
        self.assertIsNone(shipped.delivered_at)

        self.scheduler.advance(9.5)
        self.assertEqual(self.orders.get(order.id).status, OrderStatus.SHIPPED)

        self.scheduler.advance(0.5)
        delivered = self.orders.get(order.id)
        self.assertEqual(delivered.status, OrderStatus.DELIVERED)
        self.assertEqual(delivered.delivered_at, START + timedelta(seconds=20))
        self.assertEqual(delivered.shipped_at, START + timedelta(seconds=10))

        # stan koncowy - nic wiecej sie nie dzieje
        self.scheduler.advance(100)
        self.assertEqual(self.orders.get(order.id).status, OrderStatus.DELIVERED)
        self.assertEqual(self.orders.pending_transitions(), 0)

    def test_both_transitions_fire_in_one_big_step(self):
        order = self.orders.place([CartLine(self.product_a, "M")])
        seen = []
        self.orders.subscribe(lambda: seen.append(self.orders.get(order.id).status))

        self.scheduler.advance(60)

        self.assertEqual(seen, [OrderStatus.SHIPPED, OrderStatus.DELIVERED])

    def test_transition_broadcasts_to_all_subscribers(self):
        self.orders.place([CartLine(self.product_a, "M")])
        other = Mock()
        self.orders.subscribe(other)
        self.listener.reset_mock()

        self.scheduler.advance(10)

        self.listener.assert_called_once_with()
        other.assert_called_once_with()

    def test_transitions_scheduled_from_creation_time(self):
        first = self.orders.place([CartLine(self.product_a, "M")])
        self.scheduler.advance(5)
        second = self.orders.place([CartLine(self.product_b, "L")])

        self.scheduler.advance(5)
        self.assertEqual(self.orders.get(first.id).status, OrderStatus.SHIPPED)
        self.assertEqual(self.orders.get(second.id).status, OrderStatus.PROCESSING)

        self.scheduler.advance(10)
        self.assertEqual(self.orders.get(first.id).status, OrderStatus.DELIVERED)
        self.assertEqual(self.orders.get(second.id).status, OrderStatus.SHIPPED)
        self.assertEqual(
            self.orders.get(second.id).shipped_at, START + timedelta(seconds=15)
        )

    def test_pending_transitions_tracked_per_order(self):
        order = self.orders.place([CartLine(self.product_a, "M")])
        self.assertEqual(self.orders.pending_transitions(order.id), 2)

        self.scheduler.advance(10)
        self.assertEqual(self.orders.pending_transitions(order.id), 1)

        self.scheduler.advance(10)
        self.assertEqual(self.orders.pending_transitions(order.id), 0)

    def test_order_records_are_immutable(self):
        order = self.orders.place([CartLine(self.product_a, "M")])

        with self.assertRaises(dataclasses.FrozenInstanceError):
            order.status = OrderStatus.DELIVERED
        self.assertIsInstance(order.lines, tuple)

    def test_dispose_cancels_pending_transitions(self):
        """
        Scenariusz: store zamkniety przed odpaleniem timerow - nic sie nie odpala, nic nie wybucha.
        """
        order = self.orders.place([CartLine(self.product_a, "M")])
        self.listener.reset_mock()

        self.orders.dispose()
        fired = self.scheduler.advance(60)

        self.assertEqual(fired, 0)
        self.assertEqual(self.scheduler.pending(), 0)
        self.assertEqual(self.orders.pending_transitions(), 0)
        self.assertEqual(self.orders.get(order.id).status, OrderStatus.PROCESSING)
        self.listener.assert_not_called()

    def test_late_fire_after_dispose_is_noop(self):
        order = self.orders.place([CartLine(self.product_a, "M")])
        self.orders.dispose()

        # timer ktory "przecisnal sie" mimo anulowania
        self.orders._on_transition(order.id, OrderStatus.SHIPPED)

        self.assertEqual(self.orders.get(order.id).status, OrderStatus.PROCESSING)

    def test_out_of_order_transition_ignored(self):
        order = self.orders.place([CartLine(self.product_a, "M")])

        with self.assertLogs("storefront.services.order_service", level="WARNING"):
            self.orders._on_transition(order.id, OrderStatus.DELIVERED)

        self.assertEqual(self.orders.get(order.id).status, OrderStatus.PROCESSING)

    def test_place_after_dispose_raises(self):
        self.orders.dispose()

        with self.assertRaises(StoreDisposedError):
            self.orders.place([CartLine(self.product_a, "M")])

    def test_place_after_dispose_leaves_no_timers(self):
        """
        Scenariusz: place po dispose nie dopisuje zamowienia ani nie planuje timerow.
        """
        self.orders.dispose()

        with self.assertRaises(StoreDisposedError):
            self.orders.place([CartLine(self.product_a, "M")])

        self.assertEqual(self.orders.count(), 0)
        self.assertEqual(self.orders.pending_transitions(), 0)
        self.assertEqual(self.scheduler.pending(), 0)
        self.listener.assert_not_called()

    def test_place_waits_for_dispose_holding_lock(self):
        """
        Scenariusz: dispose trzyma lock store'u, place z innego watku czeka i dostaje StoreDisposedError.
        """
        errors = []
        started = threading.Event()

        def place_in_thread():
            started.set()
            try:
                self.orders.place([CartLine(self.product_a, "M")])
            except StoreDisposedError as e:
                errors.append(e)

        with self.orders._lock:
            worker = threading.Thread(target=place_in_thread)
            worker.start()
            started.wait(timeout=1)
            self.orders.dispose()

        worker.join(timeout=1)

        self.assertEqual(len(errors), 1)
        self.assertEqual(self.orders.count(), 0)
        self.assertEqual(self.scheduler.pending(), 0)

    def test_dispose_twice_is_safe(self):
        self.orders.dispose()
        self.orders.dispose()

        self.assertTrue(self.orders.disposed)

    def test_invalid_durations(self):
        with self.assertRaises(ValueError):
            OrderStore(self.scheduler, processing_duration=0)
        with self.assertRaises(ValueError):
            OrderStore(self.scheduler, shipped_duration=-1)

    def test_empty_store(self):
        store = OrderStore(ManualScheduler())

        self.assertEqual(store.orders(), ())
        self.assertEqual(store.count(), 0)
        self.assertIsNone(store.get("ORD-1"))


class TestOrderStatus(unittest.TestCase):

    def test_linear_lifecycle(self):
        self.assertIs(OrderStatus.PROCESSING.next_status, OrderStatus.SHIPPED)
        self.assertIs(OrderStatus.SHIPPED.next_status, OrderStatus.DELIVERED)
        self.assertIsNone(OrderStatus.DELIVERED.next_status)
        self.assertTrue(OrderStatus.DELIVERED.is_terminal)
        self.assertFalse(OrderStatus.PROCESSING.is_terminal)
