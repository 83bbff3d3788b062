from fastapi import APIRouter, HTTPException, Request

from coin_converter.errors import InvalidAmountError, InvalidSelectionError
from coin_converter.schemas.converter import AmountUpdate, FromAssetUpdate, ToCurrencyUpdate

router = APIRouter()

# Handlers are async so signal writes and timers stay on the event loop thread.


def _converter(request: Request):
    converter = getattr(request.app.state, 'converter', None)
    if converter is None:
        raise HTTPException(status_code=503, detail='CONVERTER_NOT_STARTED')
    return converter


@router.get('/converter/state')
async def get_converter_state(request: Request):
    return _converter(request).view().model_dump()


@router.put('/converter/amount')
async def update_amount(body: AmountUpdate, request: Request):
    converter = _converter(request)
    try:
        converter.set_amount(body.amount)
    except InvalidAmountError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return converter.view().model_dump()


@router.put('/converter/from')
async def update_from_asset(body: FromAssetUpdate, request: Request):
    converter = _converter(request)
    try:
        converter.select_from_asset(body.asset_id)
    except InvalidSelectionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return converter.view().model_dump()


@router.put('/converter/to')
async def update_to_currency(body: ToCurrencyUpdate, request: Request):
    converter = _converter(request)
    try:
        converter.select_to_currency(body.currency)
    except InvalidSelectionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return converter.view().model_dump()


@router.get('/reference/assets')
async def list_assets(request: Request):
    converter = _converter(request)
    return {
        'loading': converter.loading_currencies.get(),
        'used_defaults': converter.loader.used_defaults,
        'assets': [a.model_dump() for a in converter.assets.get()],
    }


@router.get('/reference/currencies')
async def list_currencies(request: Request):
    converter = _converter(request)
    return {
        'loading': converter.loading_currencies.get(),
        'used_defaults': converter.loader.used_defaults,
        'currencies': list(converter.quote_currencies.get()),
    }


@router.get('/prices')
async def get_prices(request: Request):
    snapshot = _converter(request).price_snapshot.get()
    if snapshot is None:
        return {'rows': None, 'snapshot': None}
    return {
        'rows': [row.model_dump() for row in snapshot.table_rows()],
        'snapshot': snapshot.model_dump(),
    }


@router.get('/metrics/converter')
async def converter_metrics(request: Request):
    return _converter(request).metrics()
