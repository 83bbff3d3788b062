import math

from pydantic import BaseModel

REFERENCE_ASSETS: tuple[tuple[str, str], ...] = (
    ("bitcoin", "Bitcoin"),
    ("ethereum", "Ethereum"),
    ("litecoin", "Litecoin"),
)
REFERENCE_CURRENCIES: tuple[tuple[str, str], ...] = (
    ("usd", "$"),
    ("eur", "€"),
    ("gbp", "£"),
)


def format_number(value: float) -> str:
    """Render like the browser does: whole floats without the trailing `.0`."""
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return str(value)


class PriceTableRow(BaseModel):
    asset_id: str
    label: str
    cells: dict[str, str]


class PriceSnapshot(BaseModel):
    prices: dict[str, dict[str, float]]
    fetched_at: int

    def price(self, asset_id: str, currency: str) -> float | None:
        return self.prices.get(asset_id, {}).get(currency)

    def table_rows(self) -> list[PriceTableRow]:
        rows: list[PriceTableRow] = []
        for asset_id, label in REFERENCE_ASSETS:
            cells: dict[str, str] = {}
            for code, sign in REFERENCE_CURRENCIES:
                value = self.price(asset_id, code)
                cells[code] = "-" if value is None else f"{sign}{format_number(value)}"
            rows.append(PriceTableRow(asset_id=asset_id, label=label, cells=cells))
        return rows
