# storefront/services/notification_service.py
import itertools
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator

from storefront.domain.exceptions import ReentrantMutationError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[], None]

# kazdy notifier dostaje wlasny numer, uchwyty innych store'ow sa odrzucane
_owner_ids = itertools.count(1)


@dataclass(frozen=True)
class Subscription:
    """Uchwyt zwracany przez subscribe(), potrzebny do unsubscribe()."""

    store: str
    token: int
    owner: int


class ChangeNotifier:
    """
    Kanal powiadomien wspolny dla wszystkich store'ow.

    -subscribe/unsubscribe z jawnymi uchwytami
    -broadcast synchronicznie, w kolejnosci rejestracji
    -mutacja + broadcast pod jednym lockiem na store
    -subskrybent nie moze zmieniac store'u w trakcie jego broadcastu
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._listeners: Dict[int, Listener] = {}
        self._tokens = itertools.count(1)
        self._notifying = False
        self._owner_id = next(_owner_ids)

    @property
    def store_name(self) -> str:
        return type(self).__name__

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: Listener) -> Subscription:
        with self._lock:
            token = next(self._tokens)
            self._listeners[token] = callback
        logger.debug(f"{self.store_name}: subscriber {token} registered")
        return Subscription(store=self.store_name, token=token, owner=self._owner_id)

    def unsubscribe(self, subscription: Subscription) -> bool:
        if subscription.owner != self._owner_id:
            logger.warning(
                f"{self.store_name}: ignoring subscription {subscription.token} "
                f"that belongs to {subscription.store} #{subscription.owner}"
            )
            return False

        with self._lock:
            removed = self._listeners.pop(subscription.token, None) is not None
        if removed:
            logger.debug(f"{self.store_name}: subscriber {subscription.token} removed")
        return removed

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        """Wszystkie metody zmieniajace stan ida przez ten blok."""
        with self._lock:
            if self._notifying:
                raise ReentrantMutationError(self.store_name)
            yield
            self._broadcast()

    def _broadcast(self) -> None:
        # kopia, zeby unsubscribe w callbacku nie psul iteracji
        listeners = list(self._listeners.items())
        self._notifying = True
        try:
            for token, callback in listeners:
                try:
                    callback()
                except Exception:
                    logger.exception(
                        f"{self.store_name}: subscriber {token} failed during broadcast"
                    )
        finally:
            self._notifying = False

    def dispose(self) -> None:
        """Odpina wszystkich subskrybentow, store przestaje kogokolwiek powiadamiac."""
        with self._lock:
            self._listeners.clear()
