from __future__ import annotations

import unittest

from biowearth.models import CompanyRole
from biowearth.services.memory_collection_store import MemoryCollectionStore
from biowearth.services.settings_service import (
    DEFAULT_LISTS,
    add_setting_item,
    init_default_settings,
    load_setting_lists,
    remove_setting_item,
    resolve_filter_options,
)


class SettingsServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryCollectionStore()

    def test_init_writes_defaults_once(self) -> None:
        self.assertTrue(init_default_settings(self.store))
        lists = load_setting_lists(self.store)
        self.assertEqual(set(lists), {'formats', 'units', 'leadSources'})
        self.assertEqual(lists['units'], DEFAULT_LISTS['units'])

        add_setting_item(self.store, key='units', item='oz')
        self.assertFalse(init_default_settings(self.store))
        self.assertIn('oz', load_setting_lists(self.store)['units'])

    def test_filter_options_fall_back_to_embedded_lists(self) -> None:
        options = resolve_filter_options({'formats': ('Gel',), 'leadSources': ()}, CompanyRole.VENDOR)
        self.assertEqual(options.formats, ('Gel',))
        self.assertEqual(options.lead_sources, DEFAULT_LISTS['leadSources'])
        self.assertEqual(options.pack_types, DEFAULT_LISTS['packTypes'])
        self.assertEqual(options.statuses, ('Active', 'On Hold', 'Potential', 'Blacklisted'))
        self.assertIn('Hot Lead', resolve_filter_options({}, CompanyRole.CLIENT).statuses)

    def test_add_ignores_blanks_and_duplicates(self) -> None:
        self.assertTrue(add_setting_item(self.store, key='packTypes', item=' Tin '))
        self.assertFalse(add_setting_item(self.store, key='packTypes', item='Tin'))
        self.assertFalse(add_setting_item(self.store, key='packTypes', item='  '))
        self.assertEqual(load_setting_lists(self.store)['packTypes'], ('Tin',))

    def test_remove_item(self) -> None:
        init_default_settings(self.store)
        self.assertTrue(remove_setting_item(self.store, key='formats', item='Gummy'))
        self.assertFalse(remove_setting_item(self.store, key='formats', item='Gummy'))
        self.assertNotIn('Gummy', load_setting_lists(self.store)['formats'])

    def test_unknown_list_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            add_setting_item(self.store, key='colours', item='Red')
        with self.assertRaises(ValueError):
            remove_setting_item(self.store, key='colours', item='Red')


if __name__ == '__main__':
    unittest.main()
