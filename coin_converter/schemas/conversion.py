from pydantic import BaseModel, Field


class ConversionRequest(BaseModel):
    from_asset: str
    to_currency: str
    amount: float = Field(ge=0)


class ConversionResult(BaseModel):
    result: float | None = None
    error: str | None = None
