from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from coin_converter.api.routes import router
from coin_converter.config.settings import Settings, get_settings
from coin_converter.integrations.coingecko_rest import CoinGeckoRestClient
from coin_converter.services.converter import ConverterWidget


def build_converter(settings: Settings) -> ConverterWidget:
    rest_client = CoinGeckoRestClient(
        base_url=settings.COINGECKO_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SEC,
    )
    return ConverterWidget(
        rest_client=rest_client,
        throttle_interval_sec=settings.THROTTLE_INTERVAL_MS / 1000.0,
        poll_interval_sec=settings.PRICE_POLL_INTERVAL_SEC,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    owned = app.state.converter is None
    if owned:
        app.state.converter = build_converter(app.state.get_settings())
    converter = app.state.converter

    await converter.start()
    print("[APP][converter_start]", flush=True)
    try:
        yield
    finally:
        converter.stop()
        print("[APP][converter_stop]", flush=True)
        if owned:
            app.state.converter = None


app = FastAPI(title="Coin Converter", version="0.1.0", lifespan=lifespan)
app.include_router(router, prefix="/v1")

# NOTE: lazy-built so app import does not read env during tests.
app.state.get_settings = get_settings
app.state.converter = None
