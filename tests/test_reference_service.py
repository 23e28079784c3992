from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from sqlalchemy.dialects import postgresql

from purchasing_migration.services.reference_service import (
    MissingFallbackUserError,
    ProductRef,
    build_reference_data,
    load_reference_rows,
)


def _sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


class BuildReferenceDataTests(unittest.TestCase):
    def test_no_target_users_is_fatal(self) -> None:
        with self.assertRaises(MissingFallbackUserError):
            build_reference_data([], [])

    def test_first_user_is_fallback(self) -> None:
        references = build_reference_data(
            [ProductRef(id='product-1', name='Inverter', sku=None, description=None)],
            ['user-a', 'user-b'],
        )
        self.assertEqual(references.fallback_user_id, 'user-a')
        self.assertEqual(references.resolve_required_actor('user-b'), 'user-b')
        self.assertEqual(references.resolve_required_actor('deleted-user'), 'user-a')
        self.assertIsNone(references.resolve_actor(None))
        self.assertEqual(references.products_by_id['product-1'].name, 'Inverter')


class LoadReferenceRowsTests(unittest.TestCase):
    def test_queries_are_scoped_to_target_organization(self) -> None:
        session = MagicMock()

        products, user_ids = load_reference_rows(session, org_id='new-org')

        self.assertEqual((products, user_ids), ([], []))
        statements = [_sql(call.args[0]) for call in session.execute.call_args_list]
        self.assertEqual(len(statements), 2)
        product_sql, user_sql = statements
        self.assertIn('FROM products', product_sql)
        self.assertIn('products.organization_id', product_sql)
        self.assertIn('users.organization_id', user_sql)
        self.assertIn('ORDER BY users.created_at ASC, users.id ASC', user_sql)


if __name__ == '__main__':
    unittest.main()
