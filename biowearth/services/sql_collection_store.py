from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Mapping
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from biowearth.models import Collection, StoredDocument
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

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _strip_id(data: Mapping[str, object]) -> dict:
    return copy.deepcopy({key: value for key, value in data.items() if key != 'id'})


class SqlCollectionStore:
    """Document collections kept as JSON rows of a single ``documents`` table."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory
        self._subscribers = SubscriberRegistry()
        # Serializes read-then-deliver so a stale snapshot never lands after a newer one.
        self._publish_lock = threading.RLock()

    def _snapshot(self, db: Session, collection: Collection) -> Snapshot:
        rows = db.execute(
            select(StoredDocument)
            .where(StoredDocument.collection == collection.value)
            .order_by(StoredDocument.created_at.asc(), StoredDocument.id.asc())
        ).scalars().all()
        return tuple({'id': row.id, **copy.deepcopy(row.data or {})} for row in rows)

    def _get(self, db: Session, collection: Collection, doc_id: str) -> StoredDocument | None:
        return db.execute(
            select(StoredDocument).where(StoredDocument.collection == collection.value, StoredDocument.id == doc_id)
        ).scalar_one_or_none()

    def _publish(self, collection: Collection) -> None:
        if not self._subscribers.has_subscribers(collection):
            return
        with self._publish_lock:
            with self.session_factory() as db:
                snapshot = self._snapshot(db, collection)
            self._subscribers.deliver(collection, snapshot)

    def subscribe(self, collection: str | Collection, callback: SnapshotCallback) -> Unsubscribe:
        resolved = resolve_collection(collection)
        with self._publish_lock:
            unsubscribe = self._subscribers.add(resolved, callback)
            with self.session_factory() as db:
                snapshot = self._snapshot(db, resolved)
            self._subscribers.deliver(resolved, snapshot, only=callback)
        return unsubscribe

    def list_documents(self, collection: str | Collection) -> Snapshot:
        resolved = resolve_collection(collection)
        with self.session_factory() as db:
            return self._snapshot(db, resolved)

    def add(self, collection: str | Collection, data: Mapping[str, object]) -> str:
        resolved = resolve_collection(collection)
        doc_id = new_document_id()
        payload = _strip_id(data)
        payload['createdAt'] = created_stamp()
        now = _now()
        with self.session_factory() as db:
            db.add(StoredDocument(collection=resolved.value, id=doc_id, data=payload, created_at=now, updated_at=now))
            db.commit()
        logger.debug('Added %s/%s', resolved.value, doc_id)
        self._publish(resolved)
        return doc_id

    def update(self, collection: str | Collection, doc_id: str, data: Mapping[str, object]) -> None:
        resolved = resolve_collection(collection)
        with self.session_factory() as db:
            row = self._get(db, resolved, doc_id)
            if row is None:
                raise DocumentNotFoundError(f'{resolved.value}/{doc_id} not found')
            # Reassign so the JSON column is flagged dirty.
            row.data = {**(row.data or {}), **_strip_id(data)}
            row.updated_at = _now()
            db.commit()
        self._publish(resolved)

    def set(self, collection: str | Collection, doc_id: str, data: Mapping[str, object]) -> None:
        resolved = resolve_collection(collection)
        now = _now()
        with self.session_factory() as db:
            row = self._get(db, resolved, doc_id)
            if row is None:
                db.add(StoredDocument(collection=resolved.value, id=doc_id, data=_strip_id(data), created_at=now, updated_at=now))
            else:
                row.data = _strip_id(data)
                row.updated_at = now
            db.commit()
        self._publish(resolved)

    def delete(self, collection: str | Collection, doc_id: str) -> None:
        resolved = resolve_collection(collection)
        with self.session_factory() as db:
            result = db.execute(
                delete(StoredDocument).where(StoredDocument.collection == resolved.value, StoredDocument.id == doc_id)
            )
            if not result.rowcount:
                raise DocumentNotFoundError(f'{resolved.value}/{doc_id} not found')
            db.commit()
        self._publish(resolved)
