from __future__ import annotations

import asyncio

from coin_converter.errors import PriceFeedError
from coin_converter.schemas.asset import DEFAULT_ASSETS, DEFAULT_QUOTE_CURRENCIES, Asset
from coin_converter.services.reactive import Signal
from coin_converter.services.scheduler import LoopScheduler

REFERENCE_DATA_FALLBACK_MESSAGE = "Error occurred during loading currencies. Used default values."


class ReferenceDataLoader:
    """Loads the asset catalog and quote currencies together, or neither."""

    def __init__(
        self,
        *,
        rest_client,
        assets: Signal[tuple[Asset, ...]],
        quote_currencies: Signal[tuple[str, ...]],
        loading: Signal[bool],
    ) -> None:
        self.rest_client = rest_client
        self.assets = assets
        self.quote_currencies = quote_currencies
        self.loading = loading
        self.loads = 0
        self.fallbacks = 0
        self.used_defaults = False
        self.last_error: str | None = None
        self.closed = False

    async def _fetch(self) -> tuple[tuple[Asset, ...], tuple[str, ...]]:
        coins, currencies = await asyncio.gather(
            asyncio.to_thread(self.rest_client.get_coins_list),
            asyncio.to_thread(self.rest_client.get_supported_vs_currencies),
        )
        assets = tuple(Asset.model_validate(row) for row in coins)
        codes = tuple(str(code) for code in currencies)
        if not assets:
            raise PriceFeedError("empty coins list")
        if not codes:
            raise PriceFeedError("empty supported currencies list")
        return assets, codes

    async def load(self) -> bool:
        """Return True when fresh data was published, False when defaults were."""
        self.loads += 1
        self.loading.set(True)
        try:
            assets, codes = await self._fetch()
        except Exception as exc:
            self.fallbacks += 1
            self.used_defaults = True
            self.last_error = str(exc) or type(exc).__name__
            print(
                f"[REFDATA][load_fallback] {REFERENCE_DATA_FALLBACK_MESSAGE} error={self.last_error}",
                flush=True,
            )
            if not self.closed:
                self.assets.set(DEFAULT_ASSETS)
                self.quote_currencies.set(DEFAULT_QUOTE_CURRENCIES)
            return False
        else:
            self.used_defaults = False
            self.last_error = None
            if not self.closed:
                self.assets.set(assets)
                self.quote_currencies.set(codes)
            print(
                f"[REFDATA][load_ok] assets={len(assets)} quote_currencies={len(codes)}",
                flush=True,
            )
            return True
        finally:
            if not self.closed:
                self.loading.set(False)

    def start(self, scheduler: LoopScheduler) -> None:
        """Raise the loading flag now and run the load in the background."""
        self.loading.set(True)
        scheduler.spawn(self.load())

    def close(self) -> None:
        self.closed = True

    def metrics(self) -> dict:
        return {
            "loads": self.loads,
            "fallbacks": self.fallbacks,
            "used_defaults": self.used_defaults,
            "last_error": self.last_error,
        }
