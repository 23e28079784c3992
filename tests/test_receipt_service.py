from __future__ import annotations

import itertools
import unittest

import factories
from purchasing_migration.models import CostType, InspectionRequirement, ReceiptItemCondition, ReceiptStatus
from purchasing_migration.services.receipt_service import (
    synthesize_goods_receipts,
    synthesize_shipment_receipts,
)


def _ids():
    counter = itertools.count(1)
    return lambda: f'id-{next(counter)}'


class ShipmentReceiptTests(unittest.TestCase):
    def _synthesize(self, *, allocations, shipment_items=None, po_numbers=None, shipments=None, user_ids=None):
        return synthesize_shipment_receipts(
            shipments=shipments or [factories.shipment()],
            shipment_items=shipment_items or [factories.shipment_item()],
            allocations=allocations,
            purchase_order_ids={'po-1', 'po-2'},
            po_numbers=po_numbers if po_numbers is not None else {'po-1': 'PO-1001', 'po-2': 'PO-1002'},
            org_id='new-org',
            references=factories.references(user_ids=user_ids),
            id_factory=_ids(),
        )

    def test_one_receipt_per_shipment_and_purchase_order(self) -> None:
        batch = self._synthesize(
            allocations=[
                factories.allocation(id='a1', purchase_order_id='po-1', purchase_order_line_item_id='line-1'),
                factories.allocation(id='a2', purchase_order_id='po-2', purchase_order_line_item_id='line-9'),
                factories.allocation(
                    id='a3',
                    shipment_item_id='shipment-item-2',
                    purchase_order_id='po-1',
                    purchase_order_line_item_id='line-2',
                    quantity_allocated=3,
                ),
            ],
            shipment_items=[factories.shipment_item(), factories.shipment_item(id='shipment-item-2')],
        )
        self.assertEqual([r.receipt_number for r in batch.receipts], ['SH-1-PO-1001', 'SH-1-PO-1002'])
        first = batch.receipts[0]
        self.assertEqual(first.total_items_received, 13)
        self.assertEqual(first.total_items_rejected, 0)
        self.assertEqual(first.status, ReceiptStatus.ACCEPTED)
        self.assertEqual(first.inspection_required, InspectionRequirement.NO)
        self.assertEqual(first.carrier, 'Carrier Co')
        self.assertEqual(first.delivery_reference, 'SH-1')
        first_items = [item for item in batch.items if item.receipt_id == first.id]
        self.assertEqual([(i.purchase_order_item_id, i.line_number) for i in first_items], [('line-1', 1), ('line-2', 2)])
        self.assertEqual(first_items[0].lot_number, 'LOT-7')
        self.assertEqual(first_items[0].warehouse_location, 'Main')
        self.assertEqual({i.condition for i in batch.items}, {ReceiptItemCondition.NEW})

    def test_missing_po_number_uses_truncated_id(self) -> None:
        batch = synthesize_shipment_receipts(
            shipments=[factories.shipment()],
            shipment_items=[factories.shipment_item()],
            allocations=[factories.allocation(purchase_order_id='1234567890abcdef')],
            purchase_order_ids={'1234567890abcdef'},
            po_numbers={},
            org_id='new-org',
            references=factories.references(),
        )
        self.assertEqual(batch.receipts[0].receipt_number, 'SH-1-12345678')

    def test_serials_attach_only_to_unambiguous_items(self) -> None:
        serials = ['SN1', 'SN2']
        single = self._synthesize(
            allocations=[factories.allocation()],
            shipment_items=[factories.shipment_item(serial_numbers=serials)],
        )
        self.assertEqual(single.items[0].serial_numbers, serials)
        self.assertIsNone(single.items[0].quality_notes)

        shared = self._synthesize(
            allocations=[
                factories.allocation(id='a1', purchase_order_id='po-1', quantity_allocated=1),
                factories.allocation(id='a2', purchase_order_id='po-2', quantity_allocated=1),
            ],
            shipment_items=[factories.shipment_item(serial_numbers=serials)],
        )
        for item in shared.items:
            self.assertIsNone(item.serial_numbers)
            self.assertEqual(item.quality_notes, 'Serials: SN1, SN2')

    def test_missing_recorder_falls_back(self) -> None:
        batch = self._synthesize(
            allocations=[factories.allocation()],
            shipments=[factories.shipment(received_by_user_id='gone', arrival_date=None)],
            user_ids=['fallback', 'someone'],
        )
        self.assertEqual(batch.receipts[0].received_by, 'fallback')
        self.assertEqual(batch.receipts[0].received_at, factories.CREATED)


class GoodsReceiptTests(unittest.TestCase):
    def _synthesize(self, goods_receipts, *, shipment_ids=frozenset(), items=None):
        return synthesize_goods_receipts(
            goods_receipts=goods_receipts,
            goods_receipt_items=items if items is not None else [factories.goods_receipt_item()],
            purchase_order_ids={'po-1'},
            shipment_ids=set(shipment_ids),
            org_id='new-org',
            references=factories.references(),
            id_factory=_ids(),
        )

    def test_standalone_receipt_is_migrated(self) -> None:
        batch = self._synthesize(
            [factories.goods_receipt()],
            items=[
                factories.goods_receipt_item(id='i1', quantity_received=4, serials_received=['A']),
                factories.goods_receipt_item(id='i2', quantity_received=2, quantity_ordered_snapshot=5),
            ],
        )
        self.assertEqual(len(batch.receipts), 1)
        self.assertEqual(batch.receipts[0].receipt_number, 'GR-1')
        self.assertEqual(batch.receipts[0].total_items_expected, 6)
        self.assertEqual([i.line_number for i in batch.items], [1, 2])
        self.assertEqual(batch.items[0].serial_numbers, ['A'])
        self.assertEqual(batch.items[1].quantity_expected, 5)
        self.assertEqual(batch.items[0].condition, ReceiptItemCondition.NEW)
        self.assertEqual(batch.receipts[0].inspection_required, InspectionRequirement.NO)
        self.assertEqual(batch.costs, [])

    def test_receipt_covered_by_migrated_shipment_is_skipped(self) -> None:
        batch = self._synthesize(
            [factories.goods_receipt(shipment_id='shipment-1', freight_cost_local=25.0)],
            shipment_ids={'shipment-1'},
        )
        self.assertEqual(batch.receipts, [])
        self.assertEqual(batch.items, [])
        self.assertEqual(batch.costs, [])

    def test_receipt_with_unknown_shipment_is_kept(self) -> None:
        batch = self._synthesize([factories.goods_receipt(shipment_id='shipment-elsewhere')], shipment_ids={'shipment-1'})
        self.assertEqual(len(batch.receipts), 1)

    def test_receipt_for_unmigrated_purchase_order_is_skipped(self) -> None:
        batch = self._synthesize([factories.goods_receipt(purchase_order_id='po-skipped')])
        self.assertEqual(batch.receipts, [])

    def test_receipt_freight_becomes_cost(self) -> None:
        batch = self._synthesize([factories.goods_receipt(freight_cost_local=25.0)])
        self.assertEqual(len(batch.costs), 1)
        cost = batch.costs[0]
        self.assertEqual(cost.cost_type, CostType.FREIGHT)
        self.assertEqual(cost.amount, 25.0)
        self.assertEqual(cost.description, 'Receipt freight cost (goods_receipts)')


if __name__ == '__main__':
    unittest.main()
