from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from biowearth.models import Collection, CompanyRole
from biowearth.records import settings_from_documents
from biowearth.services.collection_store import CollectionStore

logger = logging.getLogger(__name__)

DEFAULT_LISTS: dict[str, tuple[str, ...]] = {
    'formats': ('Powder', 'Liquid', 'Tablet', 'Capsule', 'Gummy', 'Sachet'),
    'units': ('g', 'kg', 'ml', 'L', 'pcs'),
    'packTypes': ('Jar', 'Box', 'Pouch', 'Bottle'),
    'leadSources': ('LinkedIn', 'Website', 'Referral', 'Cold Call'),
}

# Written on first start; pack types fall back to the embedded list only.
INITIAL_LIST_KEYS = ('formats', 'units', 'leadSources')

STATUS_OPTIONS: dict[CompanyRole, tuple[str, ...]] = {
    CompanyRole.VENDOR: ('Active', 'On Hold', 'Potential', 'Blacklisted'),
    CompanyRole.CLIENT: ('Lead', 'Active', 'Negotiation', 'Churned', 'Hot Lead'),
}


@dataclass(frozen=True)
class FilterOptions:
    statuses: tuple[str, ...]
    lead_sources: tuple[str, ...]
    formats: tuple[str, ...]
    units: tuple[str, ...]
    pack_types: tuple[str, ...]


def status_options(role: CompanyRole) -> tuple[str, ...]:
    return STATUS_OPTIONS[CompanyRole(role)]


def resolve_list(lists: Mapping[str, tuple[str, ...]], key: str) -> tuple[str, ...]:
    return tuple(lists.get(key) or ()) or DEFAULT_LISTS[key]


def resolve_filter_options(lists: Mapping[str, tuple[str, ...]], role: CompanyRole) -> FilterOptions:
    return FilterOptions(
        statuses=status_options(role),
        lead_sources=resolve_list(lists, 'leadSources'),
        formats=resolve_list(lists, 'formats'),
        units=resolve_list(lists, 'units'),
        pack_types=resolve_list(lists, 'packTypes'),
    )


def _validate_key(key: str) -> None:
    if key not in DEFAULT_LISTS:
        raise ValueError(f'Unknown settings list: {key}')


def load_setting_lists(store: CollectionStore) -> dict[str, tuple[str, ...]]:
    return settings_from_documents(store.list_documents(Collection.SETTINGS))


def init_default_settings(store: CollectionStore) -> bool:
    if store.list_documents(Collection.SETTINGS):
        return False
    for key in INITIAL_LIST_KEYS:
        store.set(Collection.SETTINGS, key, {'list': list(DEFAULT_LISTS[key])})
    logger.info('Initialized default settings lists: %s', ', '.join(INITIAL_LIST_KEYS))
    return True


def add_setting_item(store: CollectionStore, *, key: str, item: str) -> bool:
    _validate_key(key)
    value = (item or '').strip()
    if not value:
        return False
    current = list(load_setting_lists(store).get(key, ()))
    if value in current:
        return False
    store.set(Collection.SETTINGS, key, {'list': [*current, value]})
    return True


def remove_setting_item(store: CollectionStore, *, key: str, item: str) -> bool:
    _validate_key(key)
    current = list(load_setting_lists(store).get(key, ()))
    if item not in current:
        return False
    store.set(Collection.SETTINGS, key, {'list': [entry for entry in current if entry != item]})
    return True
