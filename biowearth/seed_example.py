from biowearth.config import settings
from biowearth.models import Collection
from biowearth.services.collection_store import CollectionStore
from biowearth.services.provider_factory import get_collection_store
from biowearth.services.settings_service import init_default_settings


def _find(store: CollectionStore, collection: Collection, field: str, value: str) -> str | None:
    for doc in store.list_documents(collection):
        if doc.get(field) == value:
            return doc['id']
    return None


def _ensure(store: CollectionStore, collection: Collection, field: str, data: dict) -> str:
    existing = _find(store, collection, field, data[field])
    if existing:
        return existing
    return store.add(collection, data)


def seed(store: CollectionStore) -> None:
    init_default_settings(store)

    ashwa = _ensure(store, Collection.PRODUCTS, 'name', {'name': 'Ashwagandha', 'format': 'Powder'})
    tonic = _ensure(store, Collection.PRODUCTS, 'name', {'name': 'Herbal Tonic', 'format': 'Liquid'})
    ashwa_sku = _ensure(
        store,
        Collection.SKUS,
        'name',
        {'name': 'ASHWAGANDHA_500g_POUCH', 'productId': ashwa, 'packSize': 500, 'unit': 'g', 'packType': 'Pouch'},
    )
    tonic_sku = _ensure(
        store,
        Collection.SKUS,
        'name',
        {'name': 'HERBALTONIC_200ml_BOTTLE', 'productId': tonic, 'packSize': 200, 'unit': 'ml', 'packType': 'Bottle'},
    )

    vendor = _ensure(
        store,
        Collection.VENDORS,
        'companyName',
        {'companyName': 'Green Roots Extracts', 'country': 'India', 'status': 'Active'},
    )
    client = _ensure(
        store,
        Collection.CLIENTS,
        'companyName',
        {
            'companyName': 'Wellness Mart',
            'country': 'UAE',
            'status': 'Active',
            'leadSource': 'Website',
            'productFormats': ['Capsule'],
        },
    )

    _ensure(
        store,
        Collection.QUOTES_RECEIVED,
        'quoteId',
        {'quoteId': 'PQ-001', 'vendorId': vendor, 'skuId': ashwa_sku, 'price': 210, 'moq': 100, 'currency': 'INR'},
    )
    _ensure(
        store,
        Collection.QUOTES_SENT,
        'quoteId',
        {'quoteId': 'SQ-001', 'clientId': client, 'skuId': ashwa_sku, 'sellingPrice': 320, 'moq': 100, 'status': 'Active'},
    )
    _ensure(
        store,
        Collection.QUOTES_SENT,
        'quoteId',
        {'quoteId': 'SQ-002', 'clientId': client, 'skuId': tonic_sku, 'sellingPrice': 450, 'moq': 50, 'status': 'Draft'},
    )
    _ensure(
        store,
        Collection.TASKS,
        'title',
        {'title': 'Send samples to Wellness Mart', 'status': 'Pending', 'dueDate': '2024-01-01', 'relatedId': client},
    )


def main() -> None:
    if settings.collection_store.strip().lower() != 'sql':
        raise SystemExit('Seeding needs COLLECTION_STORE=sql; the memory store is discarded when this script exits.')
    seed(get_collection_store())
    print('Seed data inserted/verified.')


if __name__ == '__main__':
    main()
