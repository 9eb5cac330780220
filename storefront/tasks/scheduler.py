# storefront/tasks/scheduler.py
"""
Odroczone wywolania dla przejsc statusow zamowien.

Oba schedulery oddaja uchwyt z cancel()/cancelled(), dzieki czemu
OrderStore moze anulowac wszystkie oczekujace przejscia przy dispose().
- AsyncioScheduler: timery petli zdarzen (serwis)
- ManualScheduler: wirtualny zegar przesuwany recznie (testy, skrypty)
"""
import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Protocol

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Callback = Callable[[], None]


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def now(self) -> datetime: ...

    def call_later(self, delay: float, callback: Callback) -> ScheduledCall: ...


class AsyncioScheduler:
    """
    Callbacki odpalaja sie na petli zdarzen, w tym samym watku co handlery
    HTTP, wiec store'y widza jedna linie czasu.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def call_later(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay, 0.0), callback)


@dataclass(order=True)
class ManualCall:
    when: float
    seq: int
    callback: Callback = field(compare=False)
    _cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """
    Wirtualny zegar: nic nie odpala sie samo, dopiero advance().
    Wywolania z tym samym czasem odpalaja sie w kolejnosci zaplanowania.
    Anulowane wywolania sa wyrzucane z kolejki przy call_later() i pending(),
    wiec kolejka nie rosnie, nawet gdy zegar stoi.
    """

    def __init__(self, start: datetime | None = None):
        self._start = start or datetime.now(timezone.utc)
        self._elapsed = 0.0
        self._queue: List[ManualCall] = []
        self._seq = itertools.count()

    @property
    def elapsed(self) -> float:
        return self._elapsed

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self._elapsed)

    def call_later(self, delay: float, callback: Callback) -> ManualCall:
        call = ManualCall(
            when=self._elapsed + max(delay, 0.0),
            seq=next(self._seq),
            callback=callback,
        )
        self._prune()
        heapq.heappush(self._queue, call)
        return call

    def pending(self) -> int:
        self._prune()
        return len(self._queue)

    def _prune(self) -> None:
        if any(call.cancelled() for call in self._queue):
            self._queue = [call for call in self._queue if not call.cancelled()]
            heapq.heapify(self._queue)

    def advance(self, seconds: float) -> int:
        """Przesuwa zegar i odpala wszystko co do tego czasu dojrzalo. Zwraca liczbe odpalen."""
        if seconds < 0:
            raise ValueError("Cannot move the clock backwards")

        target = self._elapsed + seconds
        fired = 0

        while self._queue and self._queue[0].when <= target:
            call = heapq.heappop(self._queue)
            if call.cancelled():
                continue
            # zegar stoi na czasie wywolania, zeby now() w callbacku bylo dokladne
            self._elapsed = call.when
            call.callback()
            fired += 1

        self._elapsed = target
        logger.debug(f"ManualScheduler advanced to +{target}s, fired {fired}")
        return fired
