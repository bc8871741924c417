from __future__ import annotations

from functools import lru_cache

from biowearth.config import settings
from biowearth.services.memory_collection_store import MemoryCollectionStore


@lru_cache(maxsize=1)
def get_collection_store():
    provider = settings.collection_store.strip().lower()
    if provider == 'sql':
        from biowearth.db import SessionLocal, engine
        from biowearth.models import Base
        from biowearth.services.sql_collection_store import SqlCollectionStore

        Base.metadata.create_all(engine)
        return SqlCollectionStore(SessionLocal)
    return MemoryCollectionStore()
