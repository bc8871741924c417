from fastapi import Request

from biowearth.services.collection_store import CollectionStore
from biowearth.services.snapshot_hub import SnapshotHub


def get_store(request: Request) -> CollectionStore:
    return request.app.state.store


def get_hub(request: Request) -> SnapshotHub:
    return request.app.state.hub
