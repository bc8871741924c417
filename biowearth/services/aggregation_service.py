from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from biowearth.models import CompanyRole, SortDirection
from biowearth.records import Company, Product, Quote, Sku, Task
from biowearth.services.sort_utils import ZERO, due_date_sort_key, normalize_sort_text, to_decimal

NUMERIC_SORT_KEYS = frozenset({'sales_potential', 'open_task_count'})
DEFAULT_SORT_KEY = 'company_name'

# Published row keys (see EnrichedRow.as_dict) to the attribute they sort by.
SORT_KEY_ALIASES = {
    'companyName': 'company_name',
    'leadSource': 'lead_source',
    'leadDate': 'lead_date',
    'driveLink': 'drive_link',
    'openTaskCount': 'open_task_count',
    'nextTask': 'next_task',
    'productNames': 'product_names',
    'productFormats': 'declared_formats',
    'involvedFormats': 'product_formats',
    'derivedFormats': 'derived_formats',
    'salesPotential': 'sales_potential',
}

COMPANY_SORT_KEYS = frozenset({'id', 'company_name', 'country', 'website', 'status', 'lead_source', 'lead_date', 'drive_link'})
ROW_SORT_KEYS = frozenset(
    {
        'open_task_count',
        'next_task',
        'product_names',
        'product_formats',
        'declared_formats',
        'derived_formats',
        'sales_potential',
        'initial',
    }
)
SORTABLE_KEYS = COMPANY_SORT_KEYS | ROW_SORT_KEYS


def resolve_sort_key(key: str) -> str:
    resolved = SORT_KEY_ALIASES.get(key, key)
    if resolved not in SORTABLE_KEYS:
        raise ValueError(f'Unknown sort key: {key}')
    return resolved


@dataclass(frozen=True)
class EnrichedRow:
    company: Company
    open_task_count: int = 0
    next_task: Task | None = None
    product_names: tuple[str, ...] = ()
    product_formats: tuple[str, ...] = ()
    derived_formats: tuple[str, ...] = ()
    sales_potential: Decimal = ZERO
    initial: str = ''

    @property
    def id(self) -> str:
        return self.company.id

    def value_for(self, key: str) -> object:
        key = SORT_KEY_ALIASES.get(key, key)
        if key == 'declared_formats':
            return self.company.product_formats
        if key in ROW_SORT_KEYS:
            return getattr(self, key)
        if key in COMPANY_SORT_KEYS:
            return getattr(self.company, key)
        return None

    def as_dict(self) -> dict:
        payload = dict(self.company.document)
        payload.update(
            {
                'id': self.company.id,
                'role': self.company.role.value,
                'companyName': self.company.company_name,
                'initial': self.initial,
                'openTaskCount': self.open_task_count,
                'nextTask': (
                    {'id': self.next_task.id, 'title': self.next_task.title, 'dueDate': self.next_task.due_date}
                    if self.next_task
                    else None
                ),
                'productNames': list(self.product_names),
                'productFormats': list(self.company.product_formats),
                'involvedFormats': list(self.product_formats),
                'derivedFormats': list(self.derived_formats),
                'salesPotential': self.sales_potential,
            }
        )
        return payload


@dataclass(frozen=True)
class RowFilters:
    company_name: str = ''
    product_name: str = ''
    status: tuple[str, ...] = ()
    lead_source: tuple[str, ...] = ()
    formats: tuple[str, ...] = ()


@dataclass(frozen=True)
class SortSpec:
    key: str = DEFAULT_SORT_KEY
    direction: SortDirection = SortDirection.ASC


def toggle_sort(current: SortSpec | None, key: str) -> SortSpec:
    same_key = current is not None and SORT_KEY_ALIASES.get(current.key, current.key) == SORT_KEY_ALIASES.get(key, key)
    if same_key:
        flipped = SortDirection.DESC if current.direction == SortDirection.ASC else SortDirection.ASC
        return SortSpec(key=key, direction=flipped)
    return SortSpec(key=key, direction=SortDirection.ASC)


def _unique(values: Iterable[str | None]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for value in values:
        if value:
            seen.setdefault(value, None)
    return tuple(seen)


def _index_tasks(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    by_company: dict[str, list[Task]] = {}
    for task in tasks:
        if not task.is_open:
            continue
        for related_id in task.related_ids:
            by_company.setdefault(related_id, []).append(task)
    return by_company


def _index_quotes(quotes: Iterable[Quote]) -> tuple[dict[str, list[Quote]], dict[str, list[Quote]]]:
    by_vendor: dict[str, list[Quote]] = {}
    by_client: dict[str, list[Quote]] = {}
    for quote in quotes:
        if quote.vendor_id:
            by_vendor.setdefault(quote.vendor_id, []).append(quote)
        if quote.client_id:
            by_client.setdefault(quote.client_id, []).append(quote)
    return by_vendor, by_client


def _enrich(
    company: Company,
    *,
    open_tasks: list[Task],
    quotes: list[Quote],
    skus_by_id: dict[str, Sku],
    products_by_id: dict[str, Product],
) -> EnrichedRow:
    next_task = min(open_tasks, key=lambda task: due_date_sort_key(task.due_date)) if open_tasks else None

    involved: list[Product] = []
    for quote in quotes:
        sku = skus_by_id.get(quote.sku_id) if quote.sku_id else None
        product = products_by_id.get(sku.product_id) if sku and sku.product_id else None
        if product is not None:
            involved.append(product)
    product_names = _unique(product.name for product in involved)
    product_formats = _unique(product.format for product in involved)

    is_client = company.role == CompanyRole.CLIENT
    if is_client:
        derived_formats = _unique([*company.product_formats, *product_formats])
        sales_potential = sum((quote.selling_price * quote.moq for quote in quotes), ZERO)
    else:
        derived_formats = product_formats
        sales_potential = ZERO

    name = company.company_name.strip()
    return EnrichedRow(
        company=company,
        open_task_count=len(open_tasks),
        next_task=next_task,
        product_names=product_names,
        product_formats=product_formats,
        derived_formats=derived_formats,
        sales_potential=sales_potential,
        initial=name[:1].upper(),
    )


def compute_rows(
    companies: Iterable[Company],
    products: Iterable[Product],
    skus: Iterable[Sku],
    quotes: Iterable[Quote],
    tasks: Iterable[Task],
) -> list[EnrichedRow]:
    """
    Join raw collections into one enriched row per company, in input order.

    Quotes are expected to be pre-filtered to the direction matching the
    companies' role. Unresolved quote -> SKU -> product references contribute
    nothing to names/formats but quotes still count toward sales potential.
    """
    products_by_id = {product.id: product for product in products}
    skus_by_id = {sku.id: sku for sku in skus}
    quotes_by_vendor, quotes_by_client = _index_quotes(quotes)
    tasks_by_company = _index_tasks(tasks)

    rows: list[EnrichedRow] = []
    for company in companies:
        owned = quotes_by_vendor if company.role == CompanyRole.VENDOR else quotes_by_client
        rows.append(
            _enrich(
                company,
                open_tasks=tasks_by_company.get(company.id, []),
                quotes=owned.get(company.id, []),
                skus_by_id=skus_by_id,
                products_by_id=products_by_id,
            )
        )
    return rows


def _selected(values: Iterable[str] | None) -> set[str]:
    if not values:
        return set()
    if isinstance(values, str):
        values = [values]
    return {normalize_sort_text(value) for value in values if value}


def _row_matches(
    row: EnrichedRow,
    *,
    name_query: str,
    product_query: str,
    statuses: set[str],
    lead_sources: set[str],
    formats: set[str],
) -> bool:
    if name_query and name_query not in normalize_sort_text(row.company.company_name):
        return False
    if product_query and not any(product_query in normalize_sort_text(name) for name in row.product_names):
        return False
    if statuses and normalize_sort_text(row.company.status) not in statuses:
        return False
    if lead_sources and normalize_sort_text(row.company.lead_source) not in lead_sources:
        return False
    if formats and not formats.intersection(normalize_sort_text(fmt) for fmt in row.derived_formats):
        return False
    return True


def _sort_text(value: object) -> str:
    if isinstance(value, (tuple, list)):
        return normalize_sort_text(', '.join(str(item) for item in value))
    return normalize_sort_text(value)


def _sort_key(key: str):
    key = SORT_KEY_ALIASES.get(key, key)
    if key in NUMERIC_SORT_KEYS:
        return lambda row: to_decimal(row.value_for(key))
    if key == 'next_task':
        return lambda row: due_date_sort_key(row.next_task.due_date if row.next_task else None)
    return lambda row: _sort_text(row.value_for(key))


def apply_filters_and_sort(
    rows: Iterable[EnrichedRow],
    filters: RowFilters | None = None,
    sort: SortSpec | None = None,
) -> list[EnrichedRow]:
    filters = filters or RowFilters()
    sort = sort or SortSpec()

    name_query = normalize_sort_text(filters.company_name)
    product_query = normalize_sort_text(filters.product_name)
    statuses = _selected(filters.status)
    lead_sources = _selected(filters.lead_source)
    formats = _selected(filters.formats)

    kept = [
        row
        for row in rows
        if _row_matches(
            row,
            name_query=name_query,
            product_query=product_query,
            statuses=statuses,
            lead_sources=lead_sources,
            formats=formats,
        )
    ]
    # sorted() keeps equal keys in input order for reverse=True as well.
    return sorted(kept, key=_sort_key(sort.key), reverse=SortDirection(sort.direction) == SortDirection.DESC)
