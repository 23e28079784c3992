from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from sqlalchemy.dialects import postgresql

from purchasing_migration.services.extraction_service import extract_source


class ExtractSourceTests(unittest.TestCase):
    def test_every_query_is_scoped_to_source_organization(self) -> None:
        session = MagicMock()

        snapshot = extract_source(session, org_id='old-org')

        statements = [
            str(call.args[0].compile(dialect=postgresql.dialect())) for call in session.execute.call_args_list
        ]
        self.assertEqual(len(statements), 9)
        for sql in statements:
            self.assertIn('organization_id', sql)
        self.assertEqual(set(snapshot.counts().values()), {0})

    def test_child_tables_are_scoped_through_their_parents(self) -> None:
        session = MagicMock()
        extract_source(session, org_id='old-org')

        by_table = {}
        for call in session.execute.call_args_list:
            stmt = call.args[0]
            by_table[stmt.get_final_froms()[0].name] = str(stmt.compile(dialect=postgresql.dialect()))

        self.assertIn('FROM purchase_orders', by_table['purchase_order_line_items'])
        self.assertIn('FROM shipments', by_table['shipment_po_allocations'])
        self.assertIn('FROM shipment_items', by_table['shipment_po_allocations'])
        self.assertIn('FROM goods_receipts', by_table['goods_receipt_line_items'])


if __name__ == '__main__':
    unittest.main()
