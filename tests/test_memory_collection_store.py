from __future__ import annotations

import threading
import unittest

from biowearth.services.collection_store import DocumentNotFoundError
from biowearth.services.memory_collection_store import MemoryCollectionStore


class MemoryCollectionStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryCollectionStore()
        self.snapshots: list[tuple[dict, ...]] = []

    def test_subscribe_delivers_current_snapshot_immediately(self) -> None:
        store = MemoryCollectionStore(seed={'clients': [{'id': 'C1', 'companyName': 'Acme'}]})
        store.subscribe('clients', self.snapshots.append)
        self.assertEqual(self.snapshots, [({'id': 'C1', 'companyName': 'Acme'},)])

    def test_every_write_publishes_full_collection(self) -> None:
        self.store.subscribe('tasks', self.snapshots.append)
        first = self.store.add('tasks', {'title': 'One'})
        second = self.store.add('tasks', {'title': 'Two'})
        self.store.update('tasks', first, {'status': 'Completed'})
        self.store.delete('tasks', second)

        self.assertEqual(len(self.snapshots), 5)
        self.assertEqual([doc['title'] for doc in self.snapshots[2]], ['One', 'Two'])
        final = self.snapshots[-1]
        self.assertEqual(len(final), 1)
        self.assertEqual(final[0]['id'], first)
        self.assertEqual(final[0]['status'], 'Completed')
        self.assertIn('createdAt', final[0])

    def test_snapshots_are_copies(self) -> None:
        doc_id = self.store.add('clients', {'companyName': 'Acme', 'productFormats': ['Powder']})
        snapshot = self.store.list_documents('clients')
        snapshot[0]['productFormats'].append('Liquid')
        self.assertEqual(self.store.list_documents('clients')[0]['productFormats'], ['Powder'])
        self.assertEqual(self.store.list_documents('clients')[0]['id'], doc_id)

    def test_unsubscribe_stops_delivery(self) -> None:
        unsubscribe = self.store.subscribe('products', self.snapshots.append)
        unsubscribe()
        self.store.add('products', {'name': 'Tonic'})
        self.assertEqual(len(self.snapshots), 1)

    def test_failing_subscriber_does_not_block_others_or_the_write(self) -> None:
        def broken(_snapshot) -> None:
            raise RuntimeError('boom')

        self.store.subscribe('skus', broken)
        self.store.subscribe('skus', self.snapshots.append)
        with self.assertLogs('biowearth.services.collection_store', level='ERROR'):
            self.store.add('skus', {'name': 'SKU'})
        self.assertEqual(len(self.snapshots), 2)
        self.assertEqual(len(self.store.list_documents('skus')), 1)

    def test_set_replaces_document(self) -> None:
        self.store.set('settings', 'formats', {'list': ['Powder']})
        self.store.set('settings', 'formats', {'list': ['Liquid']})
        self.assertEqual(self.store.list_documents('settings'), ({'id': 'formats', 'list': ['Liquid']},))

    def test_concurrent_writes_and_reads(self) -> None:
        errors: list[BaseException] = []
        start = threading.Barrier(4)

        def writer() -> None:
            start.wait()
            try:
                for index in range(200):
                    self.store.add('tasks', {'title': f'Task {index}'})
            except Exception as exc:
                errors.append(exc)

        def reader() -> None:
            start.wait()
            try:
                for _ in range(200):
                    self.store.list_documents('tasks')
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=target) for target in (writer, writer, reader, reader)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(self.store.list_documents('tasks')), 400)

    def test_missing_documents_and_unknown_collections_raise(self) -> None:
        with self.assertRaises(DocumentNotFoundError):
            self.store.update('orders', 'nope', {'qty': 1})
        with self.assertRaises(DocumentNotFoundError):
            self.store.delete('orders', 'nope')
        with self.assertRaises(ValueError):
            self.store.add('invoices', {})


if __name__ == '__main__':
    unittest.main()
