from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from biowearth.dependencies import get_hub, get_store
from biowearth.models import SortDirection
from biowearth.services.catalog_service import (
    ALL_FORMATS,
    create_product,
    list_products,
    save_sku,
    skus_for_product,
    update_product_format,
)
from biowearth.services.collection_store import CollectionStore, DocumentNotFoundError
from biowearth.services.snapshot_hub import SnapshotHub

router = APIRouter(prefix='/catalog', tags=['catalog'])


@router.get('/products')
def products(
    format_filter: str = Query(default=ALL_FORMATS, alias='format'),
    search: str = '',
    sort: str = 'name',
    direction: SortDirection = SortDirection.ASC,
    hub: SnapshotHub = Depends(get_hub),
):
    inputs = hub.inputs
    listed = list_products(
        inputs.products,
        format_filter=format_filter,
        search=search,
        sort_key=sort,
        direction=direction,
    )
    return {
        'products': [
            {**asdict(product), 'skus': [asdict(sku) for sku in skus_for_product(inputs.skus, product.id)]}
            for product in listed
        ]
    }


@router.post('/products')
def new_product(
    data: dict = Body(...),
    hub: SnapshotHub = Depends(get_hub),
    store: CollectionStore = Depends(get_store),
):
    try:
        doc_id = create_product(store, name=str(data.get('name') or ''), lists=hub.inputs.settings_lists())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': doc_id}


@router.put('/products/{product_id}/format')
def change_format(product_id: str, data: dict = Body(...), store: CollectionStore = Depends(get_store)):
    try:
        update_product_format(store, product_id, str(data.get('format') or ''))
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {'id': product_id}


@router.post('/products/{product_id}/skus')
def new_sku(
    product_id: str,
    data: dict = Body(...),
    hub: SnapshotHub = Depends(get_hub),
    store: CollectionStore = Depends(get_store),
):
    product = next((row for row in hub.inputs.products if row.id == product_id), None)
    if product is None:
        raise HTTPException(status_code=404, detail='Product not found')
    try:
        doc_id = save_sku(store, product=product, data=data, lists=hub.inputs.settings_lists())
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {'id': doc_id}
