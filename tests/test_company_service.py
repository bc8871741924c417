from __future__ import annotations

import unittest

from biowearth.models import CompanyRole, QuoteDirection
from biowearth.records import Company, Contact, Order, Quote, Task
from biowearth.services.company_service import add_contact, company_detail, save_company
from biowearth.services.memory_collection_store import MemoryCollectionStore
from biowearth.services.snapshot_hub import ConsoleInputs


class CompanyDetailTests(unittest.TestCase):
    def test_detail_collects_related_records(self) -> None:
        inputs = ConsoleInputs(
            vendors=(Company(id='V1', role=CompanyRole.VENDOR, company_name='Green Roots'),),
            contacts=(Contact(id='K1', company_id='V1', name='Asha'), Contact(id='K2', company_id='V2', name='Ben')),
            orders=(Order(id='O1', company_id='V1'),),
            tasks=(Task(id='T1', related_id='V1'), Task(id='T2', related_vendor_id='V1')),
            quotes_received=(Quote(id='Q1', direction=QuoteDirection.RECEIVED, vendor_id='V1'),),
            quotes_sent=(Quote(id='Q2', direction=QuoteDirection.SENT, client_id='V1'),),
        )
        detail = company_detail(inputs, CompanyRole.VENDOR, 'V1')
        self.assertEqual([contact.id for contact in detail.contacts], ['K1'])
        self.assertEqual([order.id for order in detail.orders], ['O1'])
        self.assertEqual([task.id for task in detail.tasks], ['T1'])
        self.assertEqual([quote.id for quote in detail.quotes], ['Q1'])
        self.assertIsNone(company_detail(inputs, CompanyRole.CLIENT, 'V1'))


class CompanyWriteTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = MemoryCollectionStore()

    def test_save_company_validates_name_and_status(self) -> None:
        with self.assertRaises(ValueError):
            save_company(self.store, CompanyRole.CLIENT, {'companyName': '  '})
        with self.assertRaises(ValueError):
            save_company(self.store, CompanyRole.VENDOR, {'companyName': 'Acme', 'status': 'Hot Lead'})

        company_id = save_company(self.store, CompanyRole.VENDOR, {'companyName': ' Acme ', 'status': 'On Hold'})
        doc = self.store.list_documents('vendors')[0]
        self.assertEqual((doc['id'], doc['companyName']), (company_id, 'Acme'))

    def test_add_contact_links_company(self) -> None:
        add_contact(self.store, company_id='C1', data={'name': 'Asha', 'email': 'asha@example.com'})
        doc = self.store.list_documents('contacts')[0]
        self.assertEqual(doc['companyId'], 'C1')
        with self.assertRaises(ValueError):
            add_contact(self.store, company_id='C1', data={'name': ''})


if __name__ == '__main__':
    unittest.main()
