from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Body, Depends, HTTPException

from biowearth.dependencies import get_hub, get_store
from biowearth.models import CompanyRole
from biowearth.services.collection_store import CollectionStore
from biowearth.services.settings_service import add_setting_item, remove_setting_item, resolve_filter_options
from biowearth.services.snapshot_hub import SnapshotHub

router = APIRouter(prefix='/admin/settings', tags=['admin'])


@router.get('')
def current_settings(role: CompanyRole = CompanyRole.CLIENT, hub: SnapshotHub = Depends(get_hub)):
    return asdict(resolve_filter_options(hub.inputs.settings_lists(), role))


@router.post('/{key}')
def add_item(key: str, data: dict = Body(...), store: CollectionStore = Depends(get_store)):
    try:
        added = add_setting_item(store, key=key, item=str(data.get('item') or ''))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'key': key, 'added': added}


@router.delete('/{key}/{item}')
def remove_item(key: str, item: str, store: CollectionStore = Depends(get_store)):
    try:
        removed = remove_setting_item(store, key=key, item=item)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'key': key, 'removed': removed}
