from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace

from biowearth.models import Collection, CompanyRole, QuoteDirection, quote_direction_for
from biowearth.records import (
    Company,
    Contact,
    Order,
    Product,
    Quote,
    Sku,
    Task,
    company_from_document,
    contact_from_document,
    order_from_document,
    product_from_document,
    quote_from_document,
    settings_from_documents,
    sku_from_document,
    task_from_document,
)
from biowearth.services.aggregation_service import EnrichedRow, compute_rows
from biowearth.services.collection_store import CollectionStore, Snapshot, Unsubscribe

logger = logging.getLogger(__name__)

InputsListener = Callable[['ConsoleInputs'], None]


@dataclass(frozen=True)
class ConsoleInputs:
    vendors: tuple[Company, ...] = ()
    clients: tuple[Company, ...] = ()
    products: tuple[Product, ...] = ()
    skus: tuple[Sku, ...] = ()
    quotes_received: tuple[Quote, ...] = ()
    quotes_sent: tuple[Quote, ...] = ()
    tasks: tuple[Task, ...] = ()
    orders: tuple[Order, ...] = ()
    contacts: tuple[Contact, ...] = ()
    settings: tuple[tuple[str, tuple[str, ...]], ...] = ()

    def companies(self, role: CompanyRole) -> tuple[Company, ...]:
        return self.vendors if role == CompanyRole.VENDOR else self.clients

    def quotes(self, direction: QuoteDirection) -> tuple[Quote, ...]:
        return self.quotes_received if direction == QuoteDirection.RECEIVED else self.quotes_sent

    def settings_lists(self) -> dict[str, tuple[str, ...]]:
        return dict(self.settings)


def _mapper(collection: Collection) -> tuple[str, Callable[[Snapshot], tuple]]:
    if collection == Collection.VENDORS:
        return 'vendors', lambda docs: tuple(company_from_document(doc, CompanyRole.VENDOR) for doc in docs)
    if collection == Collection.CLIENTS:
        return 'clients', lambda docs: tuple(company_from_document(doc, CompanyRole.CLIENT) for doc in docs)
    if collection == Collection.PRODUCTS:
        return 'products', lambda docs: tuple(product_from_document(doc) for doc in docs)
    if collection == Collection.SKUS:
        return 'skus', lambda docs: tuple(sku_from_document(doc) for doc in docs)
    if collection == Collection.QUOTES_RECEIVED:
        return 'quotes_received', lambda docs: tuple(quote_from_document(doc, QuoteDirection.RECEIVED) for doc in docs)
    if collection == Collection.QUOTES_SENT:
        return 'quotes_sent', lambda docs: tuple(quote_from_document(doc, QuoteDirection.SENT) for doc in docs)
    if collection == Collection.TASKS:
        return 'tasks', lambda docs: tuple(task_from_document(doc) for doc in docs)
    if collection == Collection.ORDERS:
        return 'orders', lambda docs: tuple(order_from_document(doc) for doc in docs)
    if collection == Collection.CONTACTS:
        return 'contacts', lambda docs: tuple(contact_from_document(doc) for doc in docs)
    return 'settings', lambda docs: tuple(settings_from_documents(docs).items())


class SnapshotHub:
    """
    Owns the current inputs of the console.

    Each collection snapshot pushed by the store replaces one field of
    ``inputs`` with a freshly built tuple; the previous ``ConsoleInputs`` is
    never mutated. Derived views such as directory rows are recomputed from
    whatever ``inputs`` holds at call time.
    """

    def __init__(self, store: CollectionStore) -> None:
        self.store = store
        self.inputs = ConsoleInputs()
        self._listeners: list[InputsListener] = []
        self._unsubscribes: list[Unsubscribe] = []
        self._lock = threading.Lock()

    def start(self) -> None:
        if self._unsubscribes:
            return
        for collection in Collection:
            self._unsubscribes.append(self.store.subscribe(collection, self._handler(collection)))
        logger.info('Snapshot hub subscribed to %d collections', len(self._unsubscribes))

    def stop(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes = []

    def add_listener(self, listener: InputsListener) -> None:
        self._listeners.append(listener)

    def _handler(self, collection: Collection) -> Callable[[Snapshot], None]:
        field_name, mapper = _mapper(collection)

        def _on_snapshot(docs: Snapshot) -> None:
            mapped = mapper(docs)
            with self._lock:
                self.inputs = replace(self.inputs, **{field_name: mapped})
                inputs = self.inputs
            logger.debug('Received %d documents for %s', len(docs), collection.value)
            for listener in list(self._listeners):
                listener(inputs)

        return _on_snapshot

    def directory_rows(self, role: CompanyRole) -> list[EnrichedRow]:
        inputs = self.inputs
        direction = quote_direction_for(role)
        return compute_rows(
            inputs.companies(role),
            inputs.products,
            inputs.skus,
            inputs.quotes(direction),
            inputs.tasks,
        )
