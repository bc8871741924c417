from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from biowearth.models import Collection, SortDirection
from biowearth.records import Product, Sku
from biowearth.services.collection_store import CollectionStore
from biowearth.services.settings_service import resolve_list
from biowearth.services.sort_utils import normalize_sort_text

ALL_FORMATS = 'All'
WS_RE = re.compile(r'\s+')


def generate_sku_code(
    *,
    product_name: str | None,
    pack_size: object = None,
    unit: str | None = None,
    pack_type: str | None = None,
    flavour: str | None = None,
    default_pack_type: str = 'Jar',
) -> str:
    """Build NAME_SIZEunit_TYPE[_FLAVOUR], e.g. ASHWA_60pcs_JAR_MINT."""
    name = WS_RE.sub('', (product_name or '').upper()) or 'PROD'
    size = str(pack_size) if pack_size not in (None, '') else '0'
    kind = (pack_type or default_pack_type).upper()
    suffix = f'_{flavour.upper()}' if flavour else ''
    return f'{name}_{size}{unit or ""}_{kind}{suffix}'


def list_products(
    products: Iterable[Product],
    *,
    format_filter: str = ALL_FORMATS,
    search: str | None = None,
    sort_key: str = 'name',
    direction: SortDirection = SortDirection.ASC,
) -> list[Product]:
    needle = normalize_sort_text(search)
    kept = [
        product
        for product in products
        if (not format_filter or format_filter == ALL_FORMATS or product.format == format_filter)
        and (not needle or needle in normalize_sort_text(product.name))
    ]
    return sorted(
        kept,
        key=lambda product: normalize_sort_text(getattr(product, sort_key, '')),
        reverse=SortDirection(direction) == SortDirection.DESC,
    )


def skus_for_product(skus: Iterable[Sku], product_id: str) -> list[Sku]:
    return [sku for sku in skus if sku.product_id == product_id]


def create_product(store: CollectionStore, *, name: str, lists: Mapping[str, tuple[str, ...]]) -> str:
    name = (name or '').strip()
    if not name:
        raise ValueError('Product name is required')
    return store.add(Collection.PRODUCTS, {'name': name, 'format': resolve_list(lists, 'formats')[0]})


def update_product_format(store: CollectionStore, product_id: str, fmt: str) -> None:
    store.update(Collection.PRODUCTS, product_id, {'format': fmt})


def save_sku(store: CollectionStore, *, product: Product, data: dict, lists: Mapping[str, tuple[str, ...]]) -> str:
    payload = dict(data)
    doc_id = payload.pop('id', None)
    if doc_id:
        store.update(Collection.SKUS, doc_id, payload)
        return doc_id

    default_pack_type = resolve_list(lists, 'packTypes')[0]
    payload.setdefault('unit', resolve_list(lists, 'units')[0])
    payload.setdefault('packType', default_pack_type)
    if not payload.get('name'):
        payload['name'] = generate_sku_code(
            product_name=product.name,
            pack_size=payload.get('packSize'),
            unit=payload.get('unit'),
            pack_type=payload.get('packType'),
            flavour=payload.get('flavour'),
            default_pack_type=default_pack_type,
        )
    payload['productId'] = product.id
    return store.add(Collection.SKUS, payload)
