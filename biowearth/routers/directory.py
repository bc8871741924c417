from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from biowearth.dependencies import get_hub, get_store
from biowearth.models import CompanyRole, SortDirection
from biowearth.services.aggregation_service import RowFilters, SortSpec, apply_filters_and_sort, resolve_sort_key
from biowearth.services.collection_store import CollectionStore, DocumentNotFoundError
from biowearth.services.company_service import add_contact, company_detail, save_company
from biowearth.services.settings_service import resolve_filter_options
from biowearth.services.snapshot_hub import SnapshotHub

router = APIRouter(prefix='/directory', tags=['directory'])


@router.get('/{role}')
def list_rows(
    role: CompanyRole,
    name: str = '',
    product: str = '',
    status: list[str] = Query(default=[]),
    lead_source: list[str] = Query(default=[]),
    formats: list[str] = Query(default=[], alias='format'),
    sort: str = 'company_name',
    direction: SortDirection = SortDirection.ASC,
    hub: SnapshotHub = Depends(get_hub),
):
    try:
        sort_key = resolve_sort_key(sort)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    filters = RowFilters(
        company_name=name,
        product_name=product,
        status=tuple(status),
        lead_source=tuple(lead_source),
        formats=tuple(formats),
    )
    rows = apply_filters_and_sort(hub.directory_rows(role), filters, SortSpec(key=sort_key, direction=direction))
    options = resolve_filter_options(hub.inputs.settings_lists(), role)
    return {
        'rows': [row.as_dict() for row in rows],
        'options': asdict(options),
        'sort': {'key': sort, 'direction': direction.value},
    }


@router.get('/{role}/{company_id}')
def detail(role: CompanyRole, company_id: str, hub: SnapshotHub = Depends(get_hub)):
    result = company_detail(hub.inputs, role, company_id)
    if result is None:
        raise HTTPException(status_code=404, detail='Company not found')
    return asdict(result)


@router.post('/{role}')
def create_company(role: CompanyRole, data: dict = Body(...), store: CollectionStore = Depends(get_store)):
    data.pop('id', None)
    try:
        doc_id = save_company(store, role, data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': doc_id}


@router.put('/{role}/{company_id}')
def update_company(
    role: CompanyRole,
    company_id: str,
    data: dict = Body(...),
    store: CollectionStore = Depends(get_store),
):
    try:
        save_company(store, role, {**data, 'id': company_id})
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': company_id}


@router.post('/{role}/{company_id}/contacts')
def create_contact(
    role: CompanyRole,
    company_id: str,
    data: dict = Body(...),
    hub: SnapshotHub = Depends(get_hub),
    store: CollectionStore = Depends(get_store),
):
    if company_detail(hub.inputs, role, company_id) is None:
        raise HTTPException(status_code=404, detail='Company not found')
    data.pop('id', None)
    try:
        doc_id = add_contact(store, company_id=company_id, data=data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': doc_id}
