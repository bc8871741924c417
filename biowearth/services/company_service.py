from __future__ import annotations

from dataclasses import dataclass

from biowearth.models import COMPANY_COLLECTIONS, Collection, CompanyRole, quote_direction_for
from biowearth.records import Company, Contact, Order, Quote, Task
from biowearth.services.collection_store import CollectionStore
from biowearth.services.settings_service import status_options
from biowearth.services.snapshot_hub import ConsoleInputs
from biowearth.services.task_service import tasks_for_company


@dataclass(frozen=True)
class CompanyDetail:
    company: Company
    contacts: list[Contact]
    orders: list[Order]
    tasks: list[Task]
    quotes: list[Quote]


def find_company(inputs: ConsoleInputs, role: CompanyRole, company_id: str) -> Company | None:
    return next((company for company in inputs.companies(role) if company.id == company_id), None)


def company_detail(inputs: ConsoleInputs, role: CompanyRole, company_id: str) -> CompanyDetail | None:
    company = find_company(inputs, role, company_id)
    if company is None:
        return None
    return CompanyDetail(
        company=company,
        contacts=[contact for contact in inputs.contacts if contact.company_id == company_id],
        orders=[order for order in inputs.orders if order.company_id == company_id],
        tasks=tasks_for_company(inputs.tasks, company_id),
        quotes=[quote for quote in inputs.quotes(quote_direction_for(role)) if quote.owner_id == company_id],
    )


def save_company(store: CollectionStore, role: CompanyRole, data: dict) -> str:
    role = CompanyRole(role)
    name = str(data.get('companyName') or '').strip()
    if not name:
        raise ValueError('Company name is required')
    status = data.get('status')
    if status and status not in status_options(role):
        raise ValueError(f'Invalid {role.value} status: {status}')

    payload = {**data, 'companyName': name}
    collection = COMPANY_COLLECTIONS[role]
    doc_id = payload.pop('id', None)
    if doc_id:
        store.update(collection, doc_id, payload)
        return doc_id
    return store.add(collection, payload)


def add_contact(store: CollectionStore, *, company_id: str, data: dict) -> str:
    name = str(data.get('name') or '').strip()
    if not name:
        raise ValueError('Name is required')
    payload = {**data, 'name': name, 'companyId': company_id}
    doc_id = payload.pop('id', None)
    if doc_id:
        store.update(Collection.CONTACTS, doc_id, payload)
        return doc_id
    return store.add(Collection.CONTACTS, payload)
