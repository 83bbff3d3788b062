from __future__ import annotations

import asyncio

from coin_converter.errors import PriceFeedError
from coin_converter.schemas.conversion import ConversionRequest, ConversionResult
from coin_converter.services.reactive import Effect, Signal
from coin_converter.services.scheduler import LoopScheduler

CONVERSION_ERROR_MESSAGE = "Error occurred during conversion. Please try again later."


class ConversionPipeline:
    """Re-prices the current (amount, from, to) selection on every input change.

    Each activation gets a generation number; a response that settles after a
    newer activation started is dropped, and only the latest activation may
    clear the converting flag.
    """

    def __init__(
        self,
        *,
        rest_client,
        amount: Signal[float],
        from_asset: Signal[str],
        to_currency: Signal[str],
        result: Signal[float | None],
        error: Signal[str | None],
        converting: Signal[bool],
        scheduler: LoopScheduler,
        discard_stale: bool = True,
    ) -> None:
        self.rest_client = rest_client
        self.amount = amount
        self.from_asset = from_asset
        self.to_currency = to_currency
        self.result = result
        self.error = error
        self.converting = converting
        self.scheduler = scheduler
        self.discard_stale = discard_stale
        self.state = "IDLE"
        self.last_outcome: str | None = None
        self._generation = 0
        self._effect = Effect([amount, from_asset, to_currency], self._trigger)
        self.closed = False

        self.conversions = 0
        self.failures = 0
        self.discarded_stale = 0
        self.last_error: str | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def start(self) -> None:
        if self.closed:
            return
        self._effect.activate()

    def refresh(self) -> None:
        self._effect.rerun()

    def stop(self) -> None:
        self.closed = True
        self._effect.dispose()

    def _trigger(self) -> None:
        self._generation += 1
        request = ConversionRequest(
            from_asset=self.from_asset.get(),
            to_currency=self.to_currency.get(),
            amount=self.amount.get(),
        )
        self.state = "CONVERTING"
        self.converting.set(True)
        self.scheduler.spawn(self._run(request, self._generation))

    async def convert_once(self, request: ConversionRequest) -> ConversionResult:
        """One lookup; never raises, failures come back as an error result."""
        try:
            payload = await asyncio.to_thread(
                self.rest_client.get_simple_price, [request.from_asset], [request.to_currency]
            )
            price = self._unit_price(payload, request)
        except Exception as exc:
            self.failures += 1
            self.last_error = str(exc) or type(exc).__name__
            print(
                "[CONVERT][error] "
                f"from={request.from_asset} to={request.to_currency} error={self.last_error}",
                flush=True,
            )
            return ConversionResult(result=None, error=CONVERSION_ERROR_MESSAGE)

        self.conversions += 1
        return ConversionResult(result=request.amount * price, error=None)

    @staticmethod
    def _unit_price(payload: object, request: ConversionRequest) -> float:
        if not isinstance(payload, dict):
            raise PriceFeedError("price response must be an object")
        quotes = payload.get(request.from_asset)
        if not isinstance(quotes, dict) or request.to_currency not in quotes:
            raise PriceFeedError(f"missing price for {request.from_asset}/{request.to_currency}")
        value = quotes[request.to_currency]
        if isinstance(value, bool) or value is None:
            raise PriceFeedError(f"invalid price for {request.from_asset}/{request.to_currency}")
        return float(value)

    def _is_current(self, generation: int) -> bool:
        return not self.discard_stale or generation == self._generation

    async def _run(self, request: ConversionRequest, generation: int) -> None:
        outcome: ConversionResult | None = None
        try:
            outcome = await self.convert_once(request)
        finally:
            self._settle(generation, outcome)

    def _settle(self, generation: int, outcome: ConversionResult | None) -> None:
        if self.closed:
            return
        if not self._is_current(generation):
            self.discarded_stale += 1
            print(
                f"[CONVERT][stale_discard] generation={generation} latest={self._generation}",
                flush=True,
            )
            return
        if outcome is not None:
            self._publish(outcome)
            self.last_outcome = "FAILED" if outcome.error else "SUCCESS"
        self.converting.set(False)
        self.state = "IDLE"

    def _publish(self, outcome: ConversionResult) -> None:
        if outcome.error is None:
            self.result.set(outcome.result)
            self.error.set(None)
        else:
            self.error.set(outcome.error)
            self.result.set(None)

    def metrics(self) -> dict:
        return {
            "state": self.state,
            "last_outcome": self.last_outcome,
            "generation": self.generation,
            "conversions": self.conversions,
            "failures": self.failures,
            "discarded_stale": self.discarded_stale,
            "last_error": self.last_error,
        }
