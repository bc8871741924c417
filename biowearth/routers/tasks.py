from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Body, Depends, HTTPException

from biowearth.dependencies import get_hub, get_store
from biowearth.services.collection_store import CollectionStore, DocumentNotFoundError
from biowearth.services.snapshot_hub import SnapshotHub
from biowearth.services.task_service import delete_task, save_task, search_tasks, toggle_task_status

router = APIRouter(prefix='/tasks', tags=['tasks'])


@router.get('')
def list_tasks(search: str = '', hub: SnapshotHub = Depends(get_hub)):
    return {'tasks': [asdict(task) for task in search_tasks(hub.inputs.tasks, search)]}


@router.post('')
def create_task(data: dict = Body(...), store: CollectionStore = Depends(get_store)):
    data.pop('id', None)
    try:
        doc_id = save_task(store, data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {'id': doc_id}


@router.post('/{task_id}/toggle')
def toggle(task_id: str, hub: SnapshotHub = Depends(get_hub), store: CollectionStore = Depends(get_store)):
    task = next((row for row in hub.inputs.tasks if row.id == task_id), None)
    if task is None:
        raise HTTPException(status_code=404, detail='Task not found')
    try:
        status = toggle_task_status(store, task)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {'id': task_id, 'status': status}


@router.delete('/{task_id}')
def remove_task(task_id: str, store: CollectionStore = Depends(get_store)):
    try:
        delete_task(store, task_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {'deleted': task_id}
