from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from biowearth.models import QUOTE_COLLECTIONS, QuoteDirection, QuoteStatus
from biowearth.records import Company, Quote, Sku
from biowearth.services.collection_store import CollectionStore
from biowearth.services.sort_utils import ZERO


@dataclass(frozen=True)
class PurchaseQuoteRow:
    quote: Quote
    vendor_name: str
    sku_name: str
    total_investment: Decimal


@dataclass(frozen=True)
class SalesQuoteRow:
    quote: Quote
    client_name: str
    sku_name: str
    total_revenue: Decimal
    total_cost: Decimal
    margin: Decimal


def _matches(quote: Quote, search: str | None) -> bool:
    return not search or search in quote.quote_id


def _names(companies: Iterable[Company]) -> dict[str, str]:
    return {company.id: company.company_name for company in companies}


def _sku_names(skus: Iterable[Sku]) -> dict[str, str]:
    return {sku.id: sku.name for sku in skus}


def purchase_quote_rows(
    quotes: Iterable[Quote],
    *,
    vendors: Iterable[Company],
    skus: Iterable[Sku],
    search: str | None = None,
) -> list[PurchaseQuoteRow]:
    vendor_names = _names(vendors)
    sku_names = _sku_names(skus)
    return [
        PurchaseQuoteRow(
            quote=quote,
            vendor_name=vendor_names.get(quote.vendor_id or '') or 'Unknown',
            sku_name=sku_names.get(quote.sku_id or '') or 'Unknown SKU',
            total_investment=quote.price * quote.moq,
        )
        for quote in quotes
        if _matches(quote, search)
    ]


def base_cost_price(quote: Quote, purchase_prices: dict[str, Decimal]) -> Decimal:
    """Manual base cost wins; otherwise the linked purchase quote's unit price."""
    if quote.base_cost_price:
        return quote.base_cost_price
    return purchase_prices.get(quote.base_quote_id or '', ZERO)


def sales_quote_rows(
    quotes: Iterable[Quote],
    *,
    clients: Iterable[Company],
    skus: Iterable[Sku],
    purchase_quotes: Iterable[Quote] = (),
    search: str | None = None,
) -> list[SalesQuoteRow]:
    client_names = _names(clients)
    sku_names = _sku_names(skus)
    purchase_prices = {quote.id: quote.price for quote in purchase_quotes}
    rows: list[SalesQuoteRow] = []
    for quote in quotes:
        if not _matches(quote, search):
            continue
        revenue = quote.selling_price * quote.moq
        cost = base_cost_price(quote, purchase_prices) * quote.moq
        rows.append(
            SalesQuoteRow(
                quote=quote,
                client_name=client_names.get(quote.client_id or '') or 'Unknown',
                sku_name=sku_names.get(quote.sku_id or '') or 'Unknown SKU',
                total_revenue=revenue,
                total_cost=cost,
                margin=revenue - cost,
            )
        )
    return rows


def save_quote(store: CollectionStore, direction: QuoteDirection, data: dict) -> str:
    direction = QuoteDirection(direction)
    owner_field = 'vendorId' if direction == QuoteDirection.RECEIVED else 'clientId'
    if not data.get(owner_field):
        raise ValueError(f'{owner_field} is required')
    if not data.get('skuId'):
        raise ValueError('skuId is required')

    payload = dict(data)
    if direction == QuoteDirection.SENT:
        status = payload.get('status') or QuoteStatus.DRAFT.value
        try:
            payload['status'] = QuoteStatus(status).value
        except ValueError as exc:
            raise ValueError(f'Invalid quote status: {status}') from exc

    collection = QUOTE_COLLECTIONS[direction]
    doc_id = payload.pop('id', None)
    if doc_id:
        store.update(collection, doc_id, payload)
        return doc_id
    return store.add(collection, payload)


def delete_quote(store: CollectionStore, direction: QuoteDirection, doc_id: str) -> None:
    store.delete(QUOTE_COLLECTIONS[QuoteDirection(direction)], doc_id)
