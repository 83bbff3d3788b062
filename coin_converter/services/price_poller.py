from __future__ import annotations

import asyncio
import time
from typing import Any, Sequence

from coin_converter.schemas.price import REFERENCE_ASSETS, REFERENCE_CURRENCIES, PriceSnapshot
from coin_converter.services.reactive import Signal
from coin_converter.services.scheduler import LoopScheduler

PRICE_POLL_ERROR_MESSAGE = "Error occurred while fetching prices. Please try again later."
DEFAULT_POLL_INTERVAL_SEC = 300.0


class PricePoller:
    """Fixed-rate poller for the reference price table.

    The next tick is scheduled before the lookup runs, so the cadence does not
    drift with request latency.
    """

    def __init__(
        self,
        *,
        rest_client,
        snapshot: Signal[PriceSnapshot | None],
        error: Signal[str | None],
        scheduler: LoopScheduler,
        interval_sec: float = DEFAULT_POLL_INTERVAL_SEC,
        asset_ids: Sequence[str] | None = None,
        vs_currencies: Sequence[str] | None = None,
    ) -> None:
        if interval_sec <= 0:
            raise ValueError("interval_sec must be > 0")
        self.rest_client = rest_client
        self.snapshot = snapshot
        self.error = error
        self.scheduler = scheduler
        self.interval_sec = interval_sec
        self.asset_ids = tuple(asset_ids or (a for a, _ in REFERENCE_ASSETS))
        self.vs_currencies = tuple(vs_currencies or (c for c, _ in REFERENCE_CURRENCIES))
        self.running = False
        self._timer: Any = None

        self.ticks = 0
        self.successes = 0
        self.failures = 0
        self.last_success_ts: int | None = None
        self.last_error: str | None = None

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        print(f"[POLL][start] interval_sec={self.interval_sec}", flush=True)
        self._tick()

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        print("[POLL][stop]", flush=True)

    def _tick(self) -> None:
        if not self.running:
            return
        self._timer = self.scheduler.call_later(self.interval_sec, self._tick)
        self.ticks += 1
        self.scheduler.spawn(self.poll_once())

    async def poll_once(self) -> PriceSnapshot | None:
        try:
            payload = await asyncio.to_thread(
                self.rest_client.get_simple_price, self.asset_ids, self.vs_currencies
            )
            snapshot = PriceSnapshot(prices=payload, fetched_at=int(time.time()))
        except Exception as exc:
            self.failures += 1
            self.last_error = str(exc) or type(exc).__name__
            print(f"[POLL][tick_error] error={self.last_error}", flush=True)
            if self.running:
                self.error.set(PRICE_POLL_ERROR_MESSAGE)
            return None

        self.successes += 1
        self.last_success_ts = snapshot.fetched_at
        if self.running:
            self.snapshot.set(snapshot)
        return snapshot

    def metrics(self) -> dict:
        return {
            "running": self.running,
            "ticks": self.ticks,
            "successes": self.successes,
            "failures": self.failures,
            "last_success_ts": self.last_success_ts,
            "last_error": self.last_error,
        }
