from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from decimal import Decimal

from biowearth.models import Collection, PaymentStatus
from biowearth.records import Order, PaymentTerm, payment_term_from_document
from biowearth.services.collection_store import CollectionStore
from biowearth.services.sort_utils import ZERO, to_decimal

REQUIRED_DOCS_LIST = ('CoA', 'MSDS', 'Health Certificate', 'Organic', 'FSSAI', 'FDA', 'GMP', 'Halal', 'Kosher')
PERCENT_TOLERANCE = Decimal('0.1')
HUNDRED = Decimal('100')


@dataclass(frozen=True)
class OrderAmounts:
    base: Decimal
    tax_amount: Decimal
    amount: Decimal


def compute_order_amounts(*, qty: object, rate: object, tax_rate: object) -> OrderAmounts:
    base = to_decimal(qty) * to_decimal(rate)
    tax = base * to_decimal(tax_rate) / HUNDRED
    return OrderAmounts(base=base, tax_amount=tax, amount=base + tax)


def _terms(terms: Iterable[PaymentTerm | Mapping]) -> list[PaymentTerm]:
    return [term if isinstance(term, PaymentTerm) else payment_term_from_document(term) for term in terms or ()]


def payment_terms_total(terms: Iterable[PaymentTerm | Mapping]) -> Decimal:
    return sum((term.percent for term in _terms(terms)), ZERO)


def payment_terms_valid(terms: Iterable[PaymentTerm | Mapping]) -> bool:
    # Advisory only: orders are saved regardless of this result.
    return abs(payment_terms_total(terms) - HUNDRED) < PERCENT_TOLERANCE


def _json_number(value: Decimal) -> int | float:
    return int(value) if value == value.to_integral_value() else float(value)


def _term_document(term: PaymentTerm) -> dict:
    return {'label': term.label, 'percent': _json_number(term.percent), 'status': term.status}


def toggle_doc_requirement(requirements: Mapping[str, object] | None, doc_name: str) -> dict:
    if doc_name not in REQUIRED_DOCS_LIST:
        raise ValueError(f'Unknown document requirement: {doc_name}')
    current = dict(requirements or {})
    if doc_name in current:
        del current[doc_name]
    else:
        current[doc_name] = {'required': True, 'received': False, 'link': ''}
    return current


def toggle_payment_status(store: CollectionStore, order: Order, index: int) -> list[dict]:
    if index < 0 or index >= len(order.payment_terms):
        raise ValueError(f'Payment term {index} does not exist on order {order.id}')
    terms = [_term_document(term) for term in order.payment_terms]
    current = terms[index]['status']
    terms[index]['status'] = PaymentStatus.PENDING.value if current == PaymentStatus.PAID.value else PaymentStatus.PAID.value
    store.update(Collection.ORDERS, order.id, {'paymentTerms': terms})
    return terms


def save_order(store: CollectionStore, *, company_id: str, data: dict) -> str:
    if not company_id:
        raise ValueError('companyId is required')
    amounts = compute_order_amounts(qty=data.get('qty'), rate=data.get('rate'), tax_rate=data.get('taxRate'))
    payload = {
        **data,
        'companyId': company_id,
        'amount': _json_number(amounts.amount),
        'taxAmount': _json_number(amounts.tax_amount),
        'paymentTerms': [_term_document(term) for term in _terms(data.get('paymentTerms') or [])],
        'docRequirements': dict(data.get('docRequirements') or {}),
    }
    doc_id = payload.pop('id', None)
    if doc_id:
        store.update(Collection.ORDERS, doc_id, payload)
        return doc_id
    return store.add(Collection.ORDERS, payload)


def toggle_order_doc_requirement(store: CollectionStore, order: Order, doc_name: str) -> dict:
    current = {name: asdict(requirement) for name, requirement in order.doc_requirements.items()}
    requirements = toggle_doc_requirement(current, doc_name)
    store.update(Collection.ORDERS, order.id, {'docRequirements': requirements})
    return requirements
