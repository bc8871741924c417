from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Protocol
from uuid import uuid4

from biowearth.models import Collection

logger = logging.getLogger(__name__)

Snapshot = tuple[dict, ...]
SnapshotCallback = Callable[[Snapshot], None]
Unsubscribe = Callable[[], None]


class DocumentNotFoundError(LookupError):
    pass


def resolve_collection(name: str | Collection) -> Collection:
    try:
        return Collection(name)
    except ValueError as exc:
        raise ValueError(f'Unknown collection: {name}') from exc


def new_document_id() -> str:
    return uuid4().hex[:20]


def created_stamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


class CollectionStore(Protocol):
    def subscribe(self, collection: str | Collection, callback: SnapshotCallback) -> Unsubscribe: ...

    def list_documents(self, collection: str | Collection) -> Snapshot: ...

    def add(self, collection: str | Collection, data: Mapping[str, object]) -> str: ...

    def update(self, collection: str | Collection, doc_id: str, data: Mapping[str, object]) -> None: ...

    def set(self, collection: str | Collection, doc_id: str, data: Mapping[str, object]) -> None: ...

    def delete(self, collection: str | Collection, doc_id: str) -> None: ...


class SubscriberRegistry:
    """Fan-out of full-collection snapshots to per-collection callbacks."""

    def __init__(self) -> None:
        self._callbacks: dict[Collection, list[SnapshotCallback]] = {}
        self._lock = threading.Lock()

    def add(self, collection: Collection, callback: SnapshotCallback) -> Unsubscribe:
        with self._lock:
            self._callbacks.setdefault(collection, []).append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                callbacks = self._callbacks.get(collection, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return _unsubscribe

    def has_subscribers(self, collection: Collection) -> bool:
        return bool(self._callbacks.get(collection))

    def deliver(self, collection: Collection, snapshot: Snapshot, *, only: SnapshotCallback | None = None) -> None:
        if only is not None:
            targets = [only]
        else:
            with self._lock:
                targets = list(self._callbacks.get(collection, []))
        for callback in targets:
            try:
                callback(snapshot)
            except Exception:
                # A failing subscriber is logged and skipped.
                logger.exception('Snapshot subscriber failed for collection %s', collection.value)
