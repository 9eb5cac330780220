# storefront/services/order_service.py
from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, Tuple

from storefront.domain.entities import CartLine, Order, OrderLine, OrderStatus
from storefront.domain.exceptions import StoreDisposedError
from storefront.services.notification_service import ChangeNotifier
from storefront.tasks.scheduler import ScheduledCall, Scheduler
from storefront.utils.settings import ORDER_PROCESSING_SECONDS, ORDER_SHIPPED_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderStore(ChangeNotifier):
    """
    Store odpowiedzialny za domene zamowien.
    Niezalezny od CartStore - dostaje kopie linii, koszyk czysci wolajacy.

    Cykl zycia zamowienia: PROCESSING -> SHIPPED -> DELIVERED.
    Oba przejscia planowane sa przy utworzeniu, wzgledem czasu utworzenia:
    - +processing_duration: SHIPPED
    - +processing_duration + shipped_duration: DELIVERED
    Kazde przejscie robi broadcast do wszystkich subskrybentow store'u.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        processing_duration: float = ORDER_PROCESSING_SECONDS,
        shipped_duration: float = ORDER_SHIPPED_SECONDS,
    ):
        if processing_duration <= 0 or shipped_duration <= 0:
            raise ValueError("Status durations must be greater than 0")

        super().__init__()
        self.scheduler = scheduler
        self.processing_duration = processing_duration
        self.shipped_duration = shipped_duration

        # kolejnosc wstawiania = kolejnosc chronologiczna
        self._orders: Dict[str, Order] = {}
        self._timers: Dict[str, Dict[OrderStatus, ScheduledCall]] = {}
        self._last_id_ms = 0
        self._disposed = False

    # query - odczyt
    def orders(self) -> Tuple[Order, ...]:
        """Najnowsze pierwsze."""
        with self._lock:
            return tuple(reversed(self._orders.values()))

    def count(self) -> int:
        with self._lock:
            return len(self._orders)

    def get(self, order_id: str) -> Order | None:
        with self._lock:
            return self._orders.get(order_id)

    def pending_transitions(self, order_id: str | None = None) -> int:
        with self._lock:
            if order_id is not None:
                return len(self._timers.get(order_id, {}))
            return sum(len(pending) for pending in self._timers.values())

    @property
    def disposed(self) -> bool:
        return self._disposed

    # commands
    def place(self, lines: Iterable[CartLine], total_price: int | None = None) -> Order:
        """
        Use Case: Zlozenie zamowienia z zawartosci koszyka.

        1. Generuje unikalne id
        2. Robi snapshot linii (pozniejsze zmiany koszyka nie wplywaja na zamowienie)
        3. Tworzy zamowienie w stanie PROCESSING
        4. Dopisuje na koniec listy
        5. Planuje oba przejscia statusu
        6. Broadcast
        """
        snapshot = tuple(OrderLine.from_cart_line(line) for line in lines)
        if total_price is None:
            total_price = sum(line.subtotal for line in snapshot)

        with self._mutation():
            # pod lockiem, zeby nie wyscigac sie z dispose()
            if self._disposed:
                raise StoreDisposedError(self.store_name)

            created_at = self.scheduler.now()
            order = Order(
                id=self._next_id(created_at),
                created_at=created_at,
                lines=snapshot,
                total_price=total_price,
            )
            self._orders[order.id] = order
            self._schedule_status_updates(order.id)

        logger.info(
            f"Order {order.id} placed: {len(snapshot)} lines, total {total_price}"
        )
        return order

    def dispose(self) -> None:
        """Anuluje wszystkie oczekujace przejscia i odpina subskrybentow."""
        with self._lock:
            if self._disposed:
                return

            self._disposed = True
            cancelled = 0
            for pending in self._timers.values():
                for handle in pending.values():
                    handle.cancel()
                    cancelled += 1
            self._timers.clear()

        super().dispose()
        logger.info(f"OrderStore disposed, cancelled {cancelled} pending transitions")

    # przejscia statusow
    def _schedule_status_updates(self, order_id: str) -> None:
        # oba czasy liczone od utworzenia, nie od siebie nawzajem
        delivered_delay = self.processing_duration + self.shipped_duration

        self._timers[order_id] = {
            OrderStatus.SHIPPED: self.scheduler.call_later(
                self.processing_duration,
                lambda: self._on_transition(order_id, OrderStatus.SHIPPED),
            ),
            OrderStatus.DELIVERED: self.scheduler.call_later(
                delivered_delay,
                lambda: self._on_transition(order_id, OrderStatus.DELIVERED),
            ),
        }

    def _on_transition(self, order_id: str, target: OrderStatus) -> None:
        with self._lock:
            if self._disposed:
                logger.debug(f"Ignoring {target.value} for {order_id}, store disposed")
                return

            pending = self._timers.get(order_id, {})
            pending.pop(target, None)
            if not pending:
                self._timers.pop(order_id, None)

            order = self._orders.get(order_id)
            if order is None or order.status.next_status is not target:
                # status nigdy sie nie cofa ani nie przeskakuje
                logger.warning(
                    f"Ignoring transition of {order_id} to {target.value} "
                    f"(current: {order.status.value if order else 'missing'})"
                )
                return

            with self._mutation():
                self._orders[order_id] = self._advance(order, target)

        logger.info(f"[NOTIFICATION] Order {order_id} is now {target.value}")

    def _advance(self, order: Order, target: OrderStatus) -> Order:
        now = self.scheduler.now()
        if target is OrderStatus.SHIPPED:
            return replace(order, status=target, shipped_at=now)
        return replace(order, status=target, delivered_at=now)

    def _next_id(self, created_at: datetime) -> str:
        ms = int(created_at.timestamp() * 1000)
        # dwa zamowienia w tej samej milisekundzie dostaja kolejne id
        if ms <= self._last_id_ms:
            ms = self._last_id_ms + 1
        self._last_id_ms = ms
        return f"ORD-{ms}"
