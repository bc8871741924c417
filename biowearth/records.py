"""Typed, read-only views of the documents held in the collection store.

Stored documents carry no enforced schema: any field may be missing or hold
the wrong type. The mapping functions below never raise for such documents.
Absent text becomes ``''``, absent lists become empty tuples and every
numeric field is coerced with :func:`to_decimal`, so malformed numbers read
as zero.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from biowearth.models import CompanyRole, PaymentStatus, QuoteDirection, TaskStatus
from biowearth.services.sort_utils import ZERO, to_decimal

Document = Mapping[str, object]


def _text(doc: Document, key: str) -> str:
    value = doc.get(key)
    if value is None:
        return ''
    return str(value)


def _optional_text(doc: Document, key: str) -> str | None:
    value = doc.get(key)
    if value is None or value == '':
        return None
    return str(value)


def _text_list(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    return tuple(str(item) for item in value if item not in (None, ''))


@dataclass(frozen=True)
class Company:
    id: str
    role: CompanyRole
    company_name: str = ''
    country: str = ''
    website: str = ''
    status: str = ''
    lead_source: str = ''
    lead_date: str = ''
    product_formats: tuple[str, ...] = ()
    drive_link: str = ''
    document: dict = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class Product:
    id: str
    name: str = ''
    format: str | None = None


@dataclass(frozen=True)
class Sku:
    id: str
    product_id: str | None = None
    name: str = ''
    variant: str = ''
    pack_size: Decimal = ZERO
    unit: str = ''
    pack_type: str = ''
    flavour: str = ''


@dataclass(frozen=True)
class Quote:
    id: str
    direction: QuoteDirection
    quote_id: str = ''
    vendor_id: str | None = None
    client_id: str | None = None
    sku_id: str | None = None
    price: Decimal = ZERO
    selling_price: Decimal = ZERO
    moq: Decimal = ZERO
    currency: str = 'INR'
    base_cost_price: Decimal = ZERO
    base_quote_id: str | None = None
    status: str = ''

    @property
    def owner_id(self) -> str | None:
        return self.vendor_id if self.direction == QuoteDirection.RECEIVED else self.client_id


@dataclass(frozen=True)
class Task:
    id: str
    title: str = ''
    status: str = TaskStatus.PENDING.value
    due_date: str | None = None
    assignee: str = ''
    priority: str = ''
    context_type: str = ''
    related_id: str | None = None
    related_client_id: str | None = None
    related_vendor_id: str | None = None

    @property
    def is_open(self) -> bool:
        return self.status != TaskStatus.COMPLETED.value

    @property
    def related_ids(self) -> set[str]:
        return {rid for rid in (self.related_id, self.related_client_id, self.related_vendor_id) if rid}


@dataclass(frozen=True)
class PaymentTerm:
    label: str = ''
    percent: Decimal = ZERO
    status: str = PaymentStatus.PENDING.value


@dataclass(frozen=True)
class DocRequirement:
    required: bool = True
    received: bool = False
    link: str = ''


@dataclass(frozen=True)
class Order:
    id: str
    company_id: str | None = None
    sku_id: str | None = None
    qty: Decimal = ZERO
    rate: Decimal = ZERO
    tax_rate: Decimal = ZERO
    amount: Decimal = ZERO
    tax_amount: Decimal = ZERO
    payment_terms: tuple[PaymentTerm, ...] = ()
    doc_requirements: dict = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class Contact:
    id: str
    company_id: str | None = None
    name: str = ''
    role: str = ''
    email: str = ''
    phone: str = ''
    linkedin: str = ''


def company_from_document(doc: Document, role: CompanyRole) -> Company:
    return Company(
        id=_text(doc, 'id'),
        role=role,
        company_name=_text(doc, 'companyName'),
        country=_text(doc, 'country'),
        website=_text(doc, 'website'),
        status=_text(doc, 'status'),
        lead_source=_text(doc, 'leadSource'),
        lead_date=_text(doc, 'leadDate'),
        product_formats=_text_list(doc.get('productFormats')),
        drive_link=_text(doc, 'driveLink'),
        document=dict(doc),
    )


def product_from_document(doc: Document) -> Product:
    return Product(id=_text(doc, 'id'), name=_text(doc, 'name'), format=_optional_text(doc, 'format'))


def sku_from_document(doc: Document) -> Sku:
    return Sku(
        id=_text(doc, 'id'),
        product_id=_optional_text(doc, 'productId'),
        name=_text(doc, 'name'),
        variant=_text(doc, 'variant'),
        pack_size=to_decimal(doc.get('packSize')),
        unit=_text(doc, 'unit'),
        pack_type=_text(doc, 'packType'),
        flavour=_text(doc, 'flavour'),
    )


def quote_from_document(doc: Document, direction: QuoteDirection) -> Quote:
    return Quote(
        id=_text(doc, 'id'),
        direction=direction,
        quote_id=_text(doc, 'quoteId'),
        vendor_id=_optional_text(doc, 'vendorId'),
        client_id=_optional_text(doc, 'clientId'),
        sku_id=_optional_text(doc, 'skuId'),
        price=to_decimal(doc.get('price')),
        selling_price=to_decimal(doc.get('sellingPrice')),
        moq=to_decimal(doc.get('moq')),
        currency=_text(doc, 'currency') or 'INR',
        base_cost_price=to_decimal(doc.get('baseCostPrice')),
        base_quote_id=_optional_text(doc, 'baseQuoteId'),
        status=_text(doc, 'status'),
    )


def task_from_document(doc: Document) -> Task:
    return Task(
        id=_text(doc, 'id'),
        title=_text(doc, 'title'),
        status=_text(doc, 'status') or TaskStatus.PENDING.value,
        due_date=_optional_text(doc, 'dueDate'),
        assignee=_text(doc, 'assignee'),
        priority=_text(doc, 'priority'),
        context_type=_text(doc, 'contextType'),
        related_id=_optional_text(doc, 'relatedId'),
        related_client_id=_optional_text(doc, 'relatedClientId'),
        related_vendor_id=_optional_text(doc, 'relatedVendorId'),
    )


def payment_term_from_document(doc: object) -> PaymentTerm:
    if not isinstance(doc, Mapping):
        return PaymentTerm()
    return PaymentTerm(
        label=_text(doc, 'label'),
        percent=to_decimal(doc.get('percent')),
        status=_text(doc, 'status') or PaymentStatus.PENDING.value,
    )


def doc_requirement_from_document(doc: object) -> DocRequirement:
    if not isinstance(doc, Mapping):
        return DocRequirement()
    return DocRequirement(
        required=bool(doc.get('required', True)),
        received=bool(doc.get('received', False)),
        link=_text(doc, 'link'),
    )


def order_from_document(doc: Document) -> Order:
    terms = doc.get('paymentTerms')
    requirements = doc.get('docRequirements')
    return Order(
        id=_text(doc, 'id'),
        company_id=_optional_text(doc, 'companyId'),
        sku_id=_optional_text(doc, 'skuId'),
        qty=to_decimal(doc.get('qty')),
        rate=to_decimal(doc.get('rate')),
        tax_rate=to_decimal(doc.get('taxRate')),
        amount=to_decimal(doc.get('amount')),
        tax_amount=to_decimal(doc.get('taxAmount')),
        payment_terms=tuple(payment_term_from_document(term) for term in terms) if isinstance(terms, list) else (),
        doc_requirements=(
            {str(name): doc_requirement_from_document(value) for name, value in requirements.items()}
            if isinstance(requirements, Mapping)
            else {}
        ),
    )


def contact_from_document(doc: Document) -> Contact:
    return Contact(
        id=_text(doc, 'id'),
        company_id=_optional_text(doc, 'companyId'),
        name=_text(doc, 'name'),
        role=_text(doc, 'role'),
        email=_text(doc, 'email'),
        phone=_text(doc, 'phone'),
        linkedin=_text(doc, 'linkedin'),
    )


def settings_from_documents(docs: Iterable[Document]) -> dict[str, tuple[str, ...]]:
    return {_text(doc, 'id'): _text_list(doc.get('list')) for doc in docs if doc.get('id')}
