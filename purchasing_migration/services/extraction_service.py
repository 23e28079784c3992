from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from purchasing_migration.legacy_models import (
    LegacyGoodsReceipt,
    LegacyGoodsReceiptLineItem,
    LegacyPurchaseOrder,
    LegacyPurchaseOrderAdditionalCost,
    LegacyPurchaseOrderLineItem,
    LegacyShipment,
    LegacyShipmentAllocation,
    LegacyShipmentItem,
    LegacySupplier,
)


logger = logging.getLogger(__name__)


@dataclass
class SourceSnapshot:
    suppliers: list = field(default_factory=list)
    purchase_orders: list = field(default_factory=list)
    purchase_order_items: list = field(default_factory=list)
    additional_costs: list = field(default_factory=list)
    shipments: list = field(default_factory=list)
    shipment_items: list = field(default_factory=list)
    shipment_allocations: list = field(default_factory=list)
    goods_receipts: list = field(default_factory=list)
    goods_receipt_items: list = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {name: len(rows) for name, rows in vars(self).items()}


def extract_source(session: Session, *, org_id: str) -> SourceSnapshot:
    """Read every legacy procurement row that belongs to one organization.

    Child tables carry no organization column, so they are scoped through
    their parent purchase order, shipment or goods receipt.
    """
    org_purchase_orders = select(LegacyPurchaseOrder.id).where(LegacyPurchaseOrder.organization_id == org_id)
    org_shipments = select(LegacyShipment.id).where(LegacyShipment.organization_id == org_id)
    org_shipment_items = select(LegacyShipmentItem.id).where(LegacyShipmentItem.shipment_id.in_(org_shipments))
    org_goods_receipts = select(LegacyGoodsReceipt.id).where(LegacyGoodsReceipt.organization_id == org_id)

    def rows(stmt) -> list:
        return list(session.execute(stmt).scalars().all())

    snapshot = SourceSnapshot(
        suppliers=rows(select(LegacySupplier).where(LegacySupplier.organization_id == org_id)),
        purchase_orders=rows(select(LegacyPurchaseOrder).where(LegacyPurchaseOrder.organization_id == org_id)),
        purchase_order_items=rows(
            select(LegacyPurchaseOrderLineItem).where(
                LegacyPurchaseOrderLineItem.purchase_order_id.in_(org_purchase_orders)
            )
        ),
        additional_costs=rows(
            select(LegacyPurchaseOrderAdditionalCost).where(
                LegacyPurchaseOrderAdditionalCost.purchase_order_id.in_(org_purchase_orders)
            )
        ),
        shipments=rows(select(LegacyShipment).where(LegacyShipment.organization_id == org_id)),
        shipment_items=rows(select(LegacyShipmentItem).where(LegacyShipmentItem.shipment_id.in_(org_shipments))),
        shipment_allocations=rows(
            select(LegacyShipmentAllocation).where(LegacyShipmentAllocation.shipment_item_id.in_(org_shipment_items))
        ),
        goods_receipts=rows(select(LegacyGoodsReceipt).where(LegacyGoodsReceipt.organization_id == org_id)),
        goods_receipt_items=rows(
            select(LegacyGoodsReceiptLineItem).where(
                LegacyGoodsReceiptLineItem.goods_receipt_id.in_(org_goods_receipts)
            )
        ),
    )
    logger.info('Extracted legacy rows: %s', ', '.join(f'{k}={v}' for k, v in snapshot.counts().items()))
    return snapshot
