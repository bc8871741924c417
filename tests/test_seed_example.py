from __future__ import annotations

import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

from biowearth.config import settings
from biowearth.models import CompanyRole
from biowearth.seed_example import main, seed
from biowearth.services.memory_collection_store import MemoryCollectionStore
from biowearth.services.snapshot_hub import SnapshotHub


class SeedExampleTests(unittest.TestCase):
    def test_seed_is_idempotent(self) -> None:
        store = MemoryCollectionStore()
        seed(store)
        seed(store)
        self.assertEqual(len(store.list_documents('products')), 2)
        self.assertEqual(len(store.list_documents('quotesSent')), 2)
        self.assertEqual(len(store.list_documents('tasks')), 1)

    def test_seeded_client_row(self) -> None:
        store = MemoryCollectionStore()
        seed(store)
        hub = SnapshotHub(store)
        hub.start()
        self.addCleanup(hub.stop)

        row = hub.directory_rows(CompanyRole.CLIENT)[0]
        self.assertEqual(row.company.company_name, 'Wellness Mart')
        self.assertEqual(row.derived_formats, ('Capsule', 'Powder', 'Liquid'))
        self.assertEqual(row.sales_potential, 320 * 100 + 450 * 50)
        self.assertEqual(row.open_task_count, 1)

    def test_script_refuses_the_memory_store(self) -> None:
        with mock.patch.object(settings, 'collection_store', 'memory'):
            with mock.patch('biowearth.seed_example.get_collection_store') as factory:
                with self.assertRaises(SystemExit):
                    main()
        factory.assert_not_called()

    def test_script_seeds_the_configured_sql_store(self) -> None:
        store = MemoryCollectionStore()
        with mock.patch.object(settings, 'collection_store', 'sql'):
            with mock.patch('biowearth.seed_example.get_collection_store', return_value=store):
                with redirect_stdout(io.StringIO()):
                    main()
        self.assertEqual(len(store.list_documents('vendors')), 1)


if __name__ == '__main__':
    unittest.main()
