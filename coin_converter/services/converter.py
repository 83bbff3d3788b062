from __future__ import annotations

import math

from coin_converter.errors import InvalidAmountError, InvalidSelectionError
from coin_converter.schemas.asset import DEFAULT_ASSETS, DEFAULT_QUOTE_CURRENCIES, Asset
from coin_converter.schemas.converter import ConverterView
from coin_converter.schemas.price import PriceSnapshot, format_number
from coin_converter.services.conversion import ConversionPipeline
from coin_converter.services.price_poller import DEFAULT_POLL_INTERVAL_SEC, PricePoller
from coin_converter.services.reactive import Signal
from coin_converter.services.reference_data import ReferenceDataLoader
from coin_converter.services.scheduler import LoopScheduler
from coin_converter.services.throttle import ThrottledValue

PRICE_TABLE_PLACEHOLDER = "Fetching prices..."


class ConverterWidget:
    """Owns the converter state and wires the throttle, loader, poller and pipeline."""

    def __init__(
        self,
        *,
        rest_client,
        scheduler: LoopScheduler | None = None,
        throttle_interval_sec: float = 0.5,
        poll_interval_sec: float = DEFAULT_POLL_INTERVAL_SEC,
    ) -> None:
        self.rest_client = rest_client
        self.scheduler = scheduler or LoopScheduler()

        self.assets: Signal[tuple[Asset, ...]] = Signal(DEFAULT_ASSETS, name="assets")
        self.quote_currencies: Signal[tuple[str, ...]] = Signal(
            DEFAULT_QUOTE_CURRENCIES, name="quote_currencies"
        )
        self.loading_currencies = Signal(False, name="loading_currencies")
        self.from_asset = Signal(DEFAULT_ASSETS[0].id, name="from_asset")
        self.to_currency = Signal(DEFAULT_QUOTE_CURRENCIES[0], name="to_currency")
        self.amount: Signal[float] = Signal(0.0, name="amount")
        self.result: Signal[float | None] = Signal(None, name="result")
        # shared by the poller and the pipeline, last write wins
        self.error: Signal[str | None] = Signal(None, name="error", dedupe=False)
        self.converting = Signal(False, name="converting")
        self.price_snapshot: Signal[PriceSnapshot | None] = Signal(None, name="price_snapshot")

        self.throttle = ThrottledValue(self.amount, throttle_interval_sec, self.scheduler)
        self.loader = ReferenceDataLoader(
            rest_client=rest_client,
            assets=self.assets,
            quote_currencies=self.quote_currencies,
            loading=self.loading_currencies,
        )
        self.poller = PricePoller(
            rest_client=rest_client,
            snapshot=self.price_snapshot,
            error=self.error,
            scheduler=self.scheduler,
            interval_sec=poll_interval_sec,
        )
        self.pipeline = ConversionPipeline(
            rest_client=rest_client,
            amount=self.throttle.output,
            from_asset=self.from_asset,
            to_currency=self.to_currency,
            result=self.result,
            error=self.error,
            converting=self.converting,
            scheduler=self.scheduler,
        )
        self.started = False
        self.stopped = False

    async def start(self) -> None:
        if self.started or self.stopped:
            return
        self.started = True
        self.throttle.start()
        self.poller.start()
        self.loader.start(self.scheduler)
        self.pipeline.start()

    def stop(self) -> None:
        if self.stopped:
            return
        self.stopped = True
        self.throttle.close()
        self.poller.stop()
        self.pipeline.stop()
        self.loader.close()

    async def settle(self) -> None:
        await self.scheduler.drain()

    def set_amount(self, value: float) -> None:
        try:
            amount = float(value)
        except (TypeError, ValueError) as exc:
            raise InvalidAmountError("INVALID_AMOUNT") from exc
        if not math.isfinite(amount) or amount < 0:
            raise InvalidAmountError("INVALID_AMOUNT")
        self.amount.set(amount)

    def select_from_asset(self, asset_id: str) -> None:
        if asset_id not in {a.id for a in self.assets.get()}:
            raise InvalidSelectionError("UNKNOWN_ASSET")
        self.from_asset.set(asset_id)

    def select_to_currency(self, currency: str) -> None:
        if currency not in self.quote_currencies.get():
            raise InvalidSelectionError("UNSUPPORTED_CURRENCY")
        self.to_currency.set(currency)

    def view(self) -> ConverterView:
        converting = self.converting.get()
        result = self.result.get()
        error = self.error.get()
        snapshot = self.price_snapshot.get()

        result_text = None
        if not converting and result is not None:
            result_text = (
                f"{format_number(self.throttle.value)} {self.from_asset.get()} = "
                f"{format_number(result)} {self.to_currency.get()}"
            )

        return ConverterView(
            amount=self.amount.get(),
            throttled_amount=self.throttle.value,
            from_asset=self.from_asset.get(),
            to_currency=self.to_currency.get(),
            assets=list(self.assets.get()),
            quote_currencies=list(self.quote_currencies.get()),
            loading_currencies=self.loading_currencies.get(),
            converting=converting,
            result=result,
            error=error,
            result_text=result_text,
            error_text=error if error and not converting else None,
            price_table=snapshot.table_rows() if snapshot is not None else None,
            price_table_text=None if snapshot is not None else PRICE_TABLE_PLACEHOLDER,
        )

    def metrics(self) -> dict:
        return {
            "throttle_emissions": self.throttle.emissions,
            "throttle_pending": self.throttle.has_pending,
            "reference_data": self.loader.metrics(),
            "price_poller": self.poller.metrics(),
            "conversion": self.pipeline.metrics(),
            "pending_tasks": self.scheduler.pending_tasks,
        }
