from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from purchasing_migration.models import (
    CostType,
    InspectionRequirement,
    PurchaseOrderCost,
    PurchaseOrderReceipt,
    PurchaseOrderReceiptItem,
    ReceiptItemCondition,
)
from purchasing_migration.services.mapping_service import (
    amount,
    map_receipt_status,
    quantity,
    synthesized_cost,
)
from purchasing_migration.services.reference_service import ReferenceData


@dataclass
class ReceiptBatch:
    receipts: list[PurchaseOrderReceipt] = field(default_factory=list)
    items: list[PurchaseOrderReceiptItem] = field(default_factory=list)
    costs: list[PurchaseOrderCost] = field(default_factory=list)

    def extend(self, other: ReceiptBatch) -> None:
        self.receipts.extend(other.receipts)
        self.items.extend(other.items)
        self.costs.extend(other.costs)


def _new_id() -> str:
    return str(uuid.uuid4())


def shipment_receipt_number(shipment_reference: str, purchase_order_id: str, po_number: str | None) -> str:
    if po_number:
        return f'{shipment_reference}-{po_number}'
    return f'{shipment_reference}-{purchase_order_id[:8]}'


def _receipt(
    *,
    receipt_id: str,
    org_id: str,
    purchase_order_id: str,
    receipt_number: str,
    received_by: str,
    received_at,
    carrier: str | None,
    tracking_number: str | None,
    delivery_reference: str | None,
    total_items: int,
    status: str | None,
    notes: str | None,
    created_at,
    updated_at,
) -> PurchaseOrderReceipt:
    return PurchaseOrderReceipt(
        id=receipt_id,
        organization_id=org_id,
        purchase_order_id=purchase_order_id,
        receipt_number=receipt_number,
        received_by=received_by,
        received_at=received_at,
        carrier=carrier,
        tracking_number=tracking_number,
        delivery_reference=delivery_reference,
        total_items_expected=total_items,
        total_items_received=total_items,
        total_items_accepted=total_items,
        total_items_rejected=0,
        status=map_receipt_status(status),
        inspection_required=InspectionRequirement.NO,
        inspection_completed_at=None,
        inspection_completed_by=None,
        quality_notes=None,
        notes=notes,
        version=1,
        created_by=None,
        updated_by=None,
        created_at=created_at,
        updated_at=updated_at,
    )


def _serial_attribution(shipment_item, allocation_count: int) -> tuple[list[str] | None, str | None]:
    serials = shipment_item.serial_numbers if shipment_item else None
    if allocation_count == 1:
        return serials, None
    # Serials cannot be split across several purchase orders, so record them as a note instead.
    if serials:
        return None, f"Serials: {', '.join(serials)}"
    return None, None


def synthesize_shipment_receipts(
    *,
    shipments: Iterable,
    shipment_items: Iterable,
    allocations: Iterable,
    purchase_order_ids: set[str],
    po_numbers: dict[str, str],
    org_id: str,
    references: ReferenceData,
    id_factory: Callable[[], str] = _new_id,
) -> ReceiptBatch:
    """One receipt per (shipment, purchase order) pair, one receipt item per allocation."""
    allocations = list(allocations)
    shipments_by_id = {shipment.id: shipment for shipment in shipments}
    shipment_items_by_id = {item.id: item for item in shipment_items}

    allocation_counts: dict[str, int] = {}
    for allocation in allocations:
        allocation_counts[allocation.shipment_item_id] = allocation_counts.get(allocation.shipment_item_id, 0) + 1

    grouped: dict[tuple[str, str], list] = {}
    for allocation in allocations:
        if allocation.purchase_order_id not in purchase_order_ids:
            continue
        shipment_item = shipment_items_by_id.get(allocation.shipment_item_id)
        if shipment_item is None:
            continue
        grouped.setdefault((shipment_item.shipment_id, allocation.purchase_order_id), []).append(allocation)

    batch = ReceiptBatch()
    for (shipment_id, purchase_order_id), group in grouped.items():
        shipment = shipments_by_id.get(shipment_id)
        if shipment is None:
            continue

        receipt_id = id_factory()
        batch.receipts.append(
            _receipt(
                receipt_id=receipt_id,
                org_id=org_id,
                purchase_order_id=purchase_order_id,
                receipt_number=shipment_receipt_number(
                    shipment.shipment_reference, purchase_order_id, po_numbers.get(purchase_order_id)
                ),
                received_by=references.resolve_required_actor(shipment.received_by_user_id),
                received_at=shipment.arrival_date or shipment.created_at,
                carrier=shipment.freight_provider,
                tracking_number=shipment.tracking_number,
                delivery_reference=shipment.shipment_reference,
                total_items=sum(quantity(allocation.quantity_allocated) for allocation in group),
                status=shipment.status,
                notes=shipment.notes,
                created_at=shipment.created_at,
                updated_at=shipment.updated_at,
            )
        )

        for line_number, allocation in enumerate(group, start=1):
            shipment_item = shipment_items_by_id.get(allocation.shipment_item_id)
            allocated = quantity(allocation.quantity_allocated)
            serial_numbers, quality_notes = _serial_attribution(
                shipment_item, allocation_counts.get(allocation.shipment_item_id, 1)
            )
            batch.items.append(
                PurchaseOrderReceiptItem(
                    id=id_factory(),
                    organization_id=org_id,
                    receipt_id=receipt_id,
                    purchase_order_item_id=allocation.purchase_order_line_item_id,
                    line_number=line_number,
                    quantity_expected=allocated,
                    quantity_received=allocated,
                    quantity_accepted=allocated,
                    quantity_rejected=0,
                    condition=ReceiptItemCondition.NEW,
                    rejection_reason=None,
                    quality_notes=quality_notes,
                    warehouse_location=shipment.warehouse_location,
                    bin_number=None,
                    lot_number=shipment_item.batch_number,
                    serial_numbers=serial_numbers,
                    expiry_date=shipment_item.expiry_date,
                    created_at=shipment_item.created_at or shipment.created_at,
                    updated_at=shipment_item.updated_at or shipment.updated_at,
                )
            )
    return batch


def is_standalone_goods_receipt(goods_receipt, *, purchase_order_ids: set[str], shipment_ids: set[str]) -> bool:
    if goods_receipt.purchase_order_id not in purchase_order_ids:
        return False
    # Receipts tied to a migrated shipment already come through the shipment path.
    return not (goods_receipt.shipment_id and goods_receipt.shipment_id in shipment_ids)


def synthesize_goods_receipts(
    *,
    goods_receipts: Iterable,
    goods_receipt_items: Iterable,
    purchase_order_ids: set[str],
    shipment_ids: set[str],
    org_id: str,
    references: ReferenceData,
    id_factory: Callable[[], str] = _new_id,
) -> ReceiptBatch:
    items_by_receipt: dict[str, list] = {}
    for item in goods_receipt_items:
        items_by_receipt.setdefault(item.goods_receipt_id, []).append(item)

    batch = ReceiptBatch()
    for goods_receipt in goods_receipts:
        if not is_standalone_goods_receipt(
            goods_receipt, purchase_order_ids=purchase_order_ids, shipment_ids=shipment_ids
        ):
            continue

        receipt_id = id_factory()
        items = items_by_receipt.get(goods_receipt.id, [])
        batch.receipts.append(
            _receipt(
                receipt_id=receipt_id,
                org_id=org_id,
                purchase_order_id=goods_receipt.purchase_order_id,
                receipt_number=goods_receipt.receipt_number,
                received_by=references.resolve_required_actor(goods_receipt.received_by_user_id),
                received_at=goods_receipt.receipt_date,
                carrier=goods_receipt.freight_provider,
                tracking_number=goods_receipt.tracking_number,
                delivery_reference=goods_receipt.shipment_reference,
                total_items=sum(quantity(item.quantity_received) for item in items),
                status=goods_receipt.status,
                notes=goods_receipt.notes,
                created_at=goods_receipt.created_at,
                updated_at=goods_receipt.updated_at,
            )
        )

        freight = amount(goods_receipt.freight_cost_local)
        if freight > 0:
            batch.costs.append(
                synthesized_cost(
                    org_id=org_id,
                    purchase_order_id=goods_receipt.purchase_order_id,
                    cost_type=CostType.FREIGHT,
                    value=freight,
                    description='Receipt freight cost (goods_receipts)',
                    cost_id=id_factory(),
                    created_at=goods_receipt.created_at,
                    updated_at=goods_receipt.updated_at,
                )
            )

        for line_number, item in enumerate(items, start=1):
            received = quantity(item.quantity_received)
            batch.items.append(
                PurchaseOrderReceiptItem(
                    id=id_factory(),
                    organization_id=org_id,
                    receipt_id=receipt_id,
                    purchase_order_item_id=item.purchase_order_line_item_id,
                    line_number=line_number,
                    quantity_expected=quantity(item.quantity_ordered_snapshot),
                    quantity_received=received,
                    quantity_accepted=received,
                    quantity_rejected=0,
                    condition=ReceiptItemCondition.NEW,
                    rejection_reason=None,
                    quality_notes=item.notes,
                    warehouse_location=None,
                    bin_number=None,
                    lot_number=None,
                    serial_numbers=item.serials_received,
                    expiry_date=None,
                    created_at=item.created_at,
                    updated_at=item.updated_at,
                )
            )
    return batch
