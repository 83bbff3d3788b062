from pydantic import BaseModel, Field

from coin_converter.schemas.asset import Asset
from coin_converter.schemas.price import PriceTableRow


class AmountUpdate(BaseModel):
    amount: float


class FromAssetUpdate(BaseModel):
    asset_id: str


class ToCurrencyUpdate(BaseModel):
    currency: str


class ConverterView(BaseModel):
    amount: float
    throttled_amount: float
    from_asset: str
    to_currency: str
    assets: list[Asset] = Field(default_factory=list)
    quote_currencies: list[str] = Field(default_factory=list)
    loading_currencies: bool = False
    converting: bool = False
    result: float | None = None
    error: str | None = None
    result_text: str | None = None
    error_text: str | None = None
    price_table: list[PriceTableRow] | None = None
    price_table_text: str | None = None
