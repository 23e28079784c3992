from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from purchasing_migration.services.batch_writer_service import chunk, reset_target, write_plan
from purchasing_migration.services.migration_service import MigrationPlan


def _plan() -> MigrationPlan:
    return MigrationPlan(
        suppliers=['s1', 's2', 's3'],
        purchase_orders=['po1'],
        purchase_order_items=['i1', 'i2'],
        costs=[],
        receipts=['r1'],
        receipt_items=['ri1'],
    )


class ChunkTests(unittest.TestCase):
    def test_chunks_preserve_order(self) -> None:
        self.assertEqual(chunk([1, 2, 3, 4, 5], 2), [[1, 2], [3, 4], [5]])
        self.assertEqual(chunk([], 500), [])

    def test_rejects_non_positive_size(self) -> None:
        with self.assertRaises(ValueError):
            chunk([1], 0)


class ResetTargetTests(unittest.TestCase):
    def test_deletes_children_before_parents(self) -> None:
        session = MagicMock()
        reset_target(session, org_id='new-org')
        tables = [call.args[0].table.name for call in session.execute.call_args_list]
        self.assertEqual(
            tables,
            [
                'purchase_order_receipt_items',
                'purchase_order_receipts',
                'purchase_order_costs',
                'purchase_order_items',
                'purchase_orders',
                'suppliers',
            ],
        )


class WritePlanTests(unittest.TestCase):
    def test_batches_commit_individually_in_dependency_order(self) -> None:
        session = MagicMock()
        written = write_plan(session, _plan(), org_id='new-org', batch_size=2)

        self.assertEqual(written, 8)
        batches = [call.args[0] for call in session.add_all.call_args_list]
        self.assertEqual(batches, [['s1', 's2'], ['s3'], ['po1'], ['i1', 'i2'], ['r1'], ['ri1']])
        self.assertEqual(session.commit.call_count, 6)
        session.execute.assert_not_called()

    def test_reset_runs_before_inserts(self) -> None:
        session = MagicMock()
        write_plan(session, _plan(), org_id='new-org', reset=True)

        names = [name for name, _args, _kwargs in session.mock_calls]
        self.assertLess(max(i for i, n in enumerate(names) if n == 'execute'), names.index('add_all'))
        # reset commit plus one commit per batch
        self.assertEqual(session.commit.call_count, 6)

    def test_single_transaction_commits_once(self) -> None:
        session = MagicMock()
        write_plan(session, _plan(), org_id='new-org', reset=True, batch_size=1, single_transaction=True)
        self.assertEqual(session.commit.call_count, 1)
        self.assertEqual(session.add_all.call_count, 8)

    def test_failure_rolls_back_and_propagates(self) -> None:
        session = MagicMock()
        session.flush.side_effect = [None, RuntimeError('constraint violation')]

        with self.assertRaises(RuntimeError):
            write_plan(session, _plan(), org_id='new-org', batch_size=2)

        session.rollback.assert_called_once()
        self.assertEqual(session.commit.call_count, 1)


if __name__ == '__main__':
    unittest.main()
