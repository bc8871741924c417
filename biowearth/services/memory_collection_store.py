from __future__ import annotations

import copy
import threading
from collections.abc import Mapping

from biowearth.models import Collection
from biowearth.services.collection_store import (
    DocumentNotFoundError,
    Snapshot,
    SnapshotCallback,
    SubscriberRegistry,
    Unsubscribe,
    created_stamp,
    new_document_id,
    resolve_collection,
)


def _payload(data: Mapping[str, object]) -> dict:
    return copy.deepcopy({key: value for key, value in data.items() if key != 'id'})


class MemoryCollectionStore:
    def __init__(self, seed: Mapping[str, list[dict]] | None = None) -> None:
        self._docs: dict[Collection, dict[str, dict]] = {collection: {} for collection in Collection}
        self._subscribers = SubscriberRegistry()
        # Held across a write and its publish so subscribers see snapshots in write order.
        self._lock = threading.RLock()
        for name, docs in (seed or {}).items():
            bucket = self._docs[resolve_collection(name)]
            for doc in docs:
                data = dict(doc)
                doc_id = str(data.pop('id', None) or new_document_id())
                bucket[doc_id] = data

    def _snapshot(self, collection: Collection) -> Snapshot:
        with self._lock:
            return tuple({'id': doc_id, **copy.deepcopy(data)} for doc_id, data in self._docs[collection].items())

    def _publish(self, collection: Collection) -> None:
        if self._subscribers.has_subscribers(collection):
            self._subscribers.deliver(collection, self._snapshot(collection))

    def subscribe(self, collection: str | Collection, callback: SnapshotCallback) -> Unsubscribe:
        resolved = resolve_collection(collection)
        with self._lock:
            unsubscribe = self._subscribers.add(resolved, callback)
            self._subscribers.deliver(resolved, self._snapshot(resolved), only=callback)
        return unsubscribe

    def list_documents(self, collection: str | Collection) -> Snapshot:
        return self._snapshot(resolve_collection(collection))

    def add(self, collection: str | Collection, data: Mapping[str, object]) -> str:
        resolved = resolve_collection(collection)
        doc_id = new_document_id()
        payload = _payload(data)
        payload['createdAt'] = created_stamp()
        with self._lock:
            self._docs[resolved][doc_id] = payload
            self._publish(resolved)
        return doc_id

    def update(self, collection: str | Collection, doc_id: str, data: Mapping[str, object]) -> None:
        resolved = resolve_collection(collection)
        with self._lock:
            existing = self._docs[resolved].get(doc_id)
            if existing is None:
                raise DocumentNotFoundError(f'{resolved.value}/{doc_id} not found')
            existing.update(_payload(data))
            self._publish(resolved)

    def set(self, collection: str | Collection, doc_id: str, data: Mapping[str, object]) -> None:
        resolved = resolve_collection(collection)
        with self._lock:
            self._docs[resolved][doc_id] = _payload(data)
            self._publish(resolved)

    def delete(self, collection: str | Collection, doc_id: str) -> None:
        resolved = resolve_collection(collection)
        with self._lock:
            if self._docs[resolved].pop(doc_id, None) is None:
                raise DocumentNotFoundError(f'{resolved.value}/{doc_id} not found')
            self._publish(resolved)
