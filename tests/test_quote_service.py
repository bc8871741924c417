from __future__ import annotations

import unittest
from decimal import Decimal

from biowearth.models import CompanyRole, QuoteDirection
from biowearth.records import Company, Quote, Sku
from biowearth.services.memory_collection_store import MemoryCollectionStore
from biowearth.services.quote_service import delete_quote, purchase_quote_rows, sales_quote_rows, save_quote


class QuoteRowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.skus = [Sku(id='S1', product_id='P1', name='ASHWA_500g_POUCH')]

    def test_purchase_rows_compute_investment(self) -> None:
        vendors = [Company(id='V1', role=CompanyRole.VENDOR, company_name='Green Roots')]
        quotes = [
            Quote(id='Q1', direction=QuoteDirection.RECEIVED, quote_id='PQ-1', vendor_id='V1', sku_id='S1', price=Decimal('20'), moq=Decimal('50')),
            Quote(id='Q2', direction=QuoteDirection.RECEIVED, quote_id='PQ-2', vendor_id='GONE', sku_id='GONE'),
        ]
        rows = purchase_quote_rows(quotes, vendors=vendors, skus=self.skus)
        self.assertEqual(rows[0].vendor_name, 'Green Roots')
        self.assertEqual(rows[0].sku_name, 'ASHWA_500g_POUCH')
        self.assertEqual(rows[0].total_investment, Decimal('1000'))
        self.assertEqual((rows[1].vendor_name, rows[1].sku_name), ('Unknown', 'Unknown SKU'))

        self.assertEqual([row.quote.id for row in purchase_quote_rows(quotes, vendors=vendors, skus=self.skus, search='-2')], ['Q2'])

    def test_sales_rows_compute_margin(self) -> None:
        clients = [Company(id='C1', role=CompanyRole.CLIENT, company_name='Wellness Mart')]
        quote = Quote(
            id='Q1',
            direction=QuoteDirection.SENT,
            quote_id='SQ-1',
            client_id='C1',
            sku_id='S1',
            selling_price=Decimal('30'),
            base_cost_price=Decimal('20'),
            moq=Decimal('10'),
        )
        row = sales_quote_rows([quote], clients=clients, skus=self.skus)[0]
        self.assertEqual(row.client_name, 'Wellness Mart')
        self.assertEqual(row.total_revenue, Decimal('300'))
        self.assertEqual(row.total_cost, Decimal('200'))
        self.assertEqual(row.margin, Decimal('100'))
        self.assertEqual(sales_quote_rows([quote], clients=clients, skus=self.skus, search='PQ'), [])

    def test_linked_purchase_quote_supplies_missing_base_cost(self) -> None:
        purchase = Quote(id='PQ1', direction=QuoteDirection.RECEIVED, vendor_id='V1', price=Decimal('12'))
        linked = Quote(
            id='Q1',
            direction=QuoteDirection.SENT,
            client_id='C1',
            selling_price=Decimal('20'),
            moq=Decimal('10'),
            base_quote_id='PQ1',
        )
        overridden = Quote(
            id='Q2',
            direction=QuoteDirection.SENT,
            client_id='C1',
            selling_price=Decimal('20'),
            moq=Decimal('10'),
            base_cost_price=Decimal('15'),
            base_quote_id='PQ1',
        )
        dangling = Quote(id='Q3', direction=QuoteDirection.SENT, selling_price=Decimal('20'), moq=Decimal('10'), base_quote_id='GONE')

        rows = sales_quote_rows([linked, overridden, dangling], clients=[], skus=[], purchase_quotes=[purchase])
        self.assertEqual([row.total_cost for row in rows], [Decimal('120'), Decimal('150'), Decimal('0')])
        self.assertEqual(rows[0].margin, Decimal('80'))


class SaveQuoteTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryCollectionStore()

    def test_sent_quote_defaults_to_draft(self) -> None:
        save_quote(self.store, QuoteDirection.SENT, {'clientId': 'C1', 'skuId': 'S1', 'sellingPrice': 10})
        self.assertEqual(self.store.list_documents('quotesSent')[0]['status'], 'Draft')

    def test_received_quote_requires_vendor_and_sku(self) -> None:
        with self.assertRaises(ValueError):
            save_quote(self.store, QuoteDirection.RECEIVED, {'skuId': 'S1'})
        with self.assertRaises(ValueError):
            save_quote(self.store, QuoteDirection.RECEIVED, {'vendorId': 'V1'})
        save_quote(self.store, 'received', {'vendorId': 'V1', 'skuId': 'S1', 'price': 5})
        self.assertEqual(len(self.store.list_documents('quotesReceived')), 1)
        self.assertNotIn('status', self.store.list_documents('quotesReceived')[0])

    def test_invalid_status_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            save_quote(self.store, QuoteDirection.SENT, {'clientId': 'C1', 'skuId': 'S1', 'status': 'Won'})

    def test_update_and_delete(self) -> None:
        quote_id = save_quote(self.store, QuoteDirection.SENT, {'clientId': 'C1', 'skuId': 'S1'})
        save_quote(self.store, QuoteDirection.SENT, {'id': quote_id, 'clientId': 'C1', 'skuId': 'S1', 'status': 'Closed'})
        self.assertEqual(self.store.list_documents('quotesSent')[0]['status'], 'Closed')
        delete_quote(self.store, QuoteDirection.SENT, quote_id)
        self.assertEqual(self.store.list_documents('quotesSent'), ())


if __name__ == '__main__':
    unittest.main()
