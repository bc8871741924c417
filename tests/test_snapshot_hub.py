from __future__ import annotations

import threading
import unittest
from decimal import Decimal

from biowearth.models import CompanyRole
from biowearth.services.memory_collection_store import MemoryCollectionStore
from biowearth.services.snapshot_hub import SnapshotHub


class SnapshotHubTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryCollectionStore(
            seed={
                'clients': [{'id': 'C1', 'companyName': 'Wellness Mart', 'status': 'Active'}],
                'vendors': [{'id': 'V1', 'companyName': 'Green Roots'}],
                'products': [{'id': 'P1', 'name': 'Ashwagandha', 'format': 'Powder'}],
                'skus': [{'id': 'S1', 'productId': 'P1', 'name': 'ASHWA_500g_POUCH'}],
                'quotesSent': [{'id': 'Q1', 'clientId': 'C1', 'skuId': 'S1', 'sellingPrice': '100', 'moq': 10}],
                'quotesReceived': [{'id': 'PQ1', 'vendorId': 'V1', 'skuId': 'S1', 'price': 60, 'moq': 'abc'}],
            }
        )
        self.hub = SnapshotHub(self.store)
        self.hub.start()
        self.addCleanup(self.hub.stop)

    def test_start_loads_every_collection(self) -> None:
        self.assertEqual([company.id for company in self.hub.inputs.clients], ['C1'])
        self.assertEqual(self.hub.inputs.quotes_received[0].moq, Decimal('0'))
        self.assertEqual(self.hub.inputs.quotes_sent[0].selling_price, Decimal('100'))

    def test_snapshots_replace_inputs_wholesale(self) -> None:
        before = self.hub.inputs
        self.store.add('tasks', {'title': 'Follow up', 'relatedId': 'C1', 'dueDate': '2024-02-01'})
        self.assertIsNot(self.hub.inputs, before)
        self.assertEqual(before.tasks, ())
        self.assertEqual(self.hub.inputs.tasks[0].title, 'Follow up')
        self.assertIs(self.hub.inputs.clients, before.clients)

    def test_directory_rows_use_role_specific_quotes(self) -> None:
        client_rows = self.hub.directory_rows(CompanyRole.CLIENT)
        vendor_rows = self.hub.directory_rows(CompanyRole.VENDOR)
        self.assertEqual(client_rows[0].sales_potential, Decimal('1000'))
        self.assertEqual(client_rows[0].derived_formats, ('Powder',))
        self.assertEqual(vendor_rows[0].derived_formats, ('Powder',))
        self.assertEqual(vendor_rows[0].sales_potential, Decimal('0'))

    def test_quote_arriving_before_its_sku_is_tolerated(self) -> None:
        self.store.add('quotesSent', {'clientId': 'C1', 'skuId': 'LATER', 'sellingPrice': 5, 'moq': 2})
        row = self.hub.directory_rows(CompanyRole.CLIENT)[0]
        self.assertEqual(row.sales_potential, Decimal('1010'))
        self.assertEqual(row.derived_formats, ('Powder',))

        self.store.set('skus', 'LATER', {'productId': 'P2'})
        self.store.set('products', 'P2', {'name': 'Tonic', 'format': 'Liquid'})
        row = self.hub.directory_rows(CompanyRole.CLIENT)[0]
        self.assertEqual(row.derived_formats, ('Powder', 'Liquid'))

    def test_listeners_receive_new_inputs(self) -> None:
        received = []
        self.hub.add_listener(received.append)
        self.store.add('products', {'name': 'Tonic'})
        self.assertEqual(len(received), 1)
        self.assertEqual(len(received[0].products), 2)

    def test_concurrent_snapshots_of_different_collections_are_all_kept(self) -> None:
        start = threading.Barrier(2)

        def add_many(collection: str, data: dict) -> None:
            start.wait()
            for _ in range(100):
                self.store.add(collection, data)

        threads = [
            threading.Thread(target=add_many, args=('tasks', {'title': 'Call'})),
            threading.Thread(target=add_many, args=('contacts', {'name': 'Asha'})),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(self.hub.inputs.tasks), 100)
        self.assertEqual(len(self.hub.inputs.contacts), 100)

    def test_stop_unsubscribes(self) -> None:
        self.hub.stop()
        self.store.add('clients', {'companyName': 'Late Co'})
        self.assertEqual(len(self.hub.inputs.clients), 1)


if __name__ == '__main__':
    unittest.main()
