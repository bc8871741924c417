from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Body, Depends, HTTPException

from biowearth.dependencies import get_hub, get_store
from biowearth.models import QuoteDirection
from biowearth.services.collection_store import CollectionStore, DocumentNotFoundError
from biowearth.services.quote_service import delete_quote, purchase_quote_rows, sales_quote_rows, save_quote
from biowearth.services.snapshot_hub import SnapshotHub

router = APIRouter(prefix='/quotes', tags=['quotes'])


@router.get('/{direction}')
def list_quotes(direction: QuoteDirection, search: str = '', hub: SnapshotHub = Depends(get_hub)):
    inputs = hub.inputs
    if direction == QuoteDirection.RECEIVED:
        rows = purchase_quote_rows(inputs.quotes_received, vendors=inputs.vendors, skus=inputs.skus, search=search)
    else:
        rows = sales_quote_rows(
            inputs.quotes_sent,
            clients=inputs.clients,
            skus=inputs.skus,
            purchase_quotes=inputs.quotes_received,
            search=search,
        )
    return {'rows': [asdict(row) for row in rows]}


@router.post('/{direction}')
def create_quote(direction: QuoteDirection, data: dict = Body(...), store: CollectionStore = Depends(get_store)):
    data.pop('id', None)
    try:
        doc_id = save_quote(store, direction, data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': doc_id}


@router.put('/{direction}/{quote_id}')
def update_quote(
    direction: QuoteDirection,
    quote_id: str,
    data: dict = Body(...),
    store: CollectionStore = Depends(get_store),
):
    try:
        save_quote(store, direction, {**data, 'id': quote_id})
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': quote_id}


@router.delete('/{direction}/{quote_id}')
def remove_quote(direction: QuoteDirection, quote_id: str, store: CollectionStore = Depends(get_store)):
    try:
        delete_quote(store, direction, quote_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {'deleted': quote_id}
