from __future__ import annotations

from collections.abc import Iterable

from biowearth.models import Collection, TaskStatus
from biowearth.records import Task
from biowearth.services.collection_store import CollectionStore
from biowearth.services.sort_utils import due_date_sort_key, normalize_sort_text


def search_tasks(tasks: Iterable[Task], query: str | None) -> list[Task]:
    needle = normalize_sort_text(query)
    if not needle:
        return list(tasks)
    return [task for task in tasks if needle in normalize_sort_text(task.title)]


def open_tasks_by_due_date(tasks: Iterable[Task], *, limit: int | None = None) -> list[Task]:
    ordered = sorted((task for task in tasks if task.is_open), key=lambda task: due_date_sort_key(task.due_date))
    return ordered[:limit] if limit is not None else ordered


def tasks_for_company(tasks: Iterable[Task], company_id: str) -> list[Task]:
    return [task for task in tasks if task.related_id == company_id]


def toggle_task_status(store: CollectionStore, task: Task) -> str:
    next_status = TaskStatus.PENDING if task.status == TaskStatus.COMPLETED.value else TaskStatus.COMPLETED
    store.update(Collection.TASKS, task.id, {'status': next_status.value})
    return next_status.value


def save_task(store: CollectionStore, data: dict) -> str:
    title = str(data.get('title') or '').strip()
    if not title:
        raise ValueError('Task title is required')
    payload = {**data, 'title': title}
    doc_id = payload.pop('id', None)
    if doc_id:
        store.update(Collection.TASKS, doc_id, payload)
        return doc_id
    payload.setdefault('status', TaskStatus.PENDING.value)
    return store.add(Collection.TASKS, payload)


def delete_task(store: CollectionStore, task_id: str) -> None:
    store.delete(Collection.TASKS, task_id)
