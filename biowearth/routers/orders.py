from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException

from biowearth.dependencies import get_hub, get_store
from biowearth.services.collection_store import CollectionStore, DocumentNotFoundError
from biowearth.services.order_service import (
    REQUIRED_DOCS_LIST,
    compute_order_amounts,
    payment_terms_total,
    payment_terms_valid,
    save_order,
    toggle_order_doc_requirement,
    toggle_payment_status,
)
from biowearth.services.snapshot_hub import SnapshotHub

router = APIRouter(prefix='/orders', tags=['orders'])


@router.post('/preview')
def preview(data: dict = Body(...)):
    amounts = compute_order_amounts(qty=data.get('qty'), rate=data.get('rate'), tax_rate=data.get('taxRate'))
    terms = data.get('paymentTerms') or []
    return {
        'amount': amounts.amount,
        'taxAmount': amounts.tax_amount,
        'paymentTermsTotal': payment_terms_total(terms),
        'paymentTermsValid': payment_terms_valid(terms),
        'requiredDocs': list(REQUIRED_DOCS_LIST),
    }


@router.post('/company/{company_id}')
def create_order(company_id: str, data: dict = Body(...), store: CollectionStore = Depends(get_store)):
    data.pop('id', None)
    try:
        doc_id = save_order(store, company_id=company_id, data=data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': doc_id}


@router.put('/{order_id}')
def update_order(order_id: str, data: dict = Body(...), store: CollectionStore = Depends(get_store)):
    try:
        save_order(store, company_id=str(data.get('companyId') or ''), data={**data, 'id': order_id})
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': order_id}


@router.post('/{order_id}/payment-terms/{index}/toggle')
def toggle_term(
    order_id: str,
    index: int,
    hub: SnapshotHub = Depends(get_hub),
    store: CollectionStore = Depends(get_store),
):
    order = next((row for row in hub.inputs.orders if row.id == order_id), None)
    if order is None:
        raise HTTPException(status_code=404, detail='Order not found')
    try:
        terms = toggle_payment_status(store, order, index)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': order_id, 'paymentTerms': terms}


@router.post('/{order_id}/docs/{doc_name}/toggle')
def toggle_doc(
    order_id: str,
    doc_name: str,
    hub: SnapshotHub = Depends(get_hub),
    store: CollectionStore = Depends(get_store),
):
    order = next((row for row in hub.inputs.orders if row.id == order_id), None)
    if order is None:
        raise HTTPException(status_code=404, detail='Order not found')
    try:
        requirements = toggle_order_doc_requirement(store, order, doc_name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': order_id, 'docRequirements': requirements}
