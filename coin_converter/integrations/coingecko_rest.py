from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import requests

from coin_converter.errors import PriceFeedError


class CoinGeckoRestClient:
    """Minimal CoinGecko REST client for the catalog, currency and price calls."""

    DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[Any] = None,
    ) -> None:
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests

    def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if params is not None:
            kwargs["params"] = params
        response = self.session.get(f"{self.base_url}{path}", **kwargs)
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _to_float(value: Any, *, field_name: str) -> float:
        if isinstance(value, bool):
            raise PriceFeedError(f"invalid numeric value for {field_name}: {value!r}")
        try:
            if value is None or value == "":
                raise PriceFeedError(f"missing value for {field_name}")
            return float(value)
        except (TypeError, ValueError) as exc:
            raise PriceFeedError(f"invalid numeric value for {field_name}: {value!r}") from exc

    def get_coins_list(self) -> List[Dict[str, Any]]:
        payload = self._get_json("/coins/list")
        if not isinstance(payload, list):
            raise PriceFeedError("coins list must be an array")

        out: List[Dict[str, Any]] = []
        for row in payload:
            if not isinstance(row, dict):
                raise PriceFeedError(f"coins list entry must be an object: {row!r}")
            missing = [k for k in ("id", "symbol", "name") if k not in row]
            if missing:
                raise PriceFeedError(f"coins list entry missing {','.join(missing)}")
            out.append({"id": row["id"], "symbol": row["symbol"], "name": row["name"]})
        return out

    def get_supported_vs_currencies(self) -> List[str]:
        payload = self._get_json("/simple/supported_vs_currencies")
        if not isinstance(payload, list) or not all(isinstance(c, str) for c in payload):
            raise PriceFeedError("supported currencies must be an array of strings")
        return list(payload)

    def get_simple_price(
        self,
        ids: Sequence[str],
        vs_currencies: Sequence[str],
    ) -> Dict[str, Dict[str, float]]:
        payload = self._get_json(
            "/simple/price",
            params={"ids": ",".join(ids), "vs_currencies": ",".join(vs_currencies)},
        )
        if not isinstance(payload, dict):
            raise PriceFeedError("price response must be an object")

        prices: Dict[str, Dict[str, float]] = {}
        for asset_id, quotes in payload.items():
            if not isinstance(quotes, dict):
                raise PriceFeedError(f"price entry for {asset_id} must be an object")
            prices[str(asset_id)] = {
                str(code): self._to_float(value, field_name=f"{asset_id}.{code}")
                for code, value in quotes.items()
            }
        return prices
