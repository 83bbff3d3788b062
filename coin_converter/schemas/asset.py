from pydantic import BaseModel, ConfigDict


class Asset(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    symbol: str
    name: str


DEFAULT_ASSETS: tuple[Asset, ...] = (
    Asset(id="01coin", symbol="zoc", name="01coin"),
    Asset(id="dogecoin", symbol="doge", name="Dogecoin"),
    Asset(id="binance-bitcoin", symbol="btcb", name="Binance Bitcoin"),
    Asset(id="usd-coin", symbol="usdc", name="USD Coin"),
)

DEFAULT_QUOTE_CURRENCIES: tuple[str, ...] = ("btc", "eth", "ltc", "bch", "bnb", "eos")
