from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone

from purchasing_migration.config import MigrationSettings
from purchasing_migration.db import MigrationDatabases
from purchasing_migration.models import (
    PurchaseOrder,
    PurchaseOrderCost,
    PurchaseOrderItem,
    PurchaseOrderReceipt,
    PurchaseOrderReceiptItem,
    Supplier,
)
from purchasing_migration.services.batch_writer_service import write_plan
from purchasing_migration.services.cost_allocation_service import allocate_shipment_costs, build_allocated_cost_rows
from purchasing_migration.services.extraction_service import SourceSnapshot, extract_source
from purchasing_migration.services.mapping_service import (
    map_additional_cost,
    map_purchase_order,
    map_purchase_order_items,
    map_supplier,
)
from purchasing_migration.services.receipt_service import synthesize_goods_receipts, synthesize_shipment_receipts
from purchasing_migration.services.reference_service import (
    ReferenceData,
    build_reference_data,
    load_reference_rows,
)
from purchasing_migration.services.report_service import print_report


logger = logging.getLogger(__name__)


@dataclass
class MigrationPlan:
    suppliers: list[Supplier] = field(default_factory=list)
    purchase_orders: list[PurchaseOrder] = field(default_factory=list)
    purchase_order_items: list[PurchaseOrderItem] = field(default_factory=list)
    costs: list[PurchaseOrderCost] = field(default_factory=list)
    receipts: list[PurchaseOrderReceipt] = field(default_factory=list)
    receipt_items: list[PurchaseOrderReceiptItem] = field(default_factory=list)
    skipped_purchase_order_ids: list[str] = field(default_factory=list)


def build_migration_plan(
    snapshot: SourceSnapshot,
    references: ReferenceData,
    *,
    org_id: str,
    now: datetime | None = None,
    id_factory: Callable[[], str] | None = None,
) -> MigrationPlan:
    """Transform one organization's legacy rows into target rows. No I/O."""
    now = now or datetime.now(timezone.utc)
    id_factory = id_factory or (lambda: str(uuid.uuid4()))
    plan = MigrationPlan()

    plan.suppliers = [map_supplier(row, org_id=org_id, references=references) for row in snapshot.suppliers]
    supplier_ids = {row.id for row in plan.suppliers}

    for legacy_po in snapshot.purchase_orders:
        if legacy_po.supplier_id not in supplier_ids:
            logger.debug('Skipping purchase order %s: supplier %s not migrated', legacy_po.id, legacy_po.supplier_id)
            plan.skipped_purchase_order_ids.append(legacy_po.id)
            continue
        plan.purchase_orders.append(map_purchase_order(legacy_po, org_id=org_id, references=references))

    purchase_order_ids = {row.id for row in plan.purchase_orders}
    po_numbers = {row.id: row.po_number for row in plan.purchase_orders}

    items_by_po: dict[str, list] = {}
    for item in snapshot.purchase_order_items:
        items_by_po.setdefault(item.purchase_order_id, []).append(item)
    for purchase_order_id, items in items_by_po.items():
        if purchase_order_id not in purchase_order_ids:
            continue
        plan.purchase_order_items.extend(
            map_purchase_order_items(
                items, purchase_order_id=purchase_order_id, org_id=org_id, references=references
            )
        )

    plan.costs = [
        map_additional_cost(cost, org_id=org_id)
        for cost in snapshot.additional_costs
        if cost.purchase_order_id in purchase_order_ids
    ]

    allocated = allocate_shipment_costs(
        shipments=snapshot.shipments,
        shipment_items=snapshot.shipment_items,
        allocations=snapshot.shipment_allocations,
        purchase_order_ids=purchase_order_ids,
    )
    plan.costs.extend(build_allocated_cost_rows(allocated, org_id=org_id, now=now, id_factory=id_factory))

    shipment_batch = synthesize_shipment_receipts(
        shipments=snapshot.shipments,
        shipment_items=snapshot.shipment_items,
        allocations=snapshot.shipment_allocations,
        purchase_order_ids=purchase_order_ids,
        po_numbers=po_numbers,
        org_id=org_id,
        references=references,
        id_factory=id_factory,
    )
    goods_batch = synthesize_goods_receipts(
        goods_receipts=snapshot.goods_receipts,
        goods_receipt_items=snapshot.goods_receipt_items,
        purchase_order_ids=purchase_order_ids,
        shipment_ids={shipment.id for shipment in snapshot.shipments},
        org_id=org_id,
        references=references,
        id_factory=id_factory,
    )
    shipment_batch.extend(goods_batch)
    plan.receipts = shipment_batch.receipts
    plan.receipt_items = shipment_batch.items
    plan.costs.extend(shipment_batch.costs)

    if plan.skipped_purchase_order_ids:
        logger.warning('Skipped %d purchase orders with unmigrated suppliers', len(plan.skipped_purchase_order_ids))
    return plan


def read_inputs(databases: MigrationDatabases, settings: MigrationSettings) -> tuple[SourceSnapshot, ReferenceData]:
    def read_source() -> SourceSnapshot:
        with databases.source_session() as session:
            return extract_source(session, org_id=settings.old_org_id)

    def read_target():
        with databases.target_session() as session:
            return load_reference_rows(session, org_id=settings.new_org_id)

    # The two databases are independent, so both read waves run at once.
    with ThreadPoolExecutor(max_workers=2) as executor:
        source_future = executor.submit(read_source)
        target_future = executor.submit(read_target)
        snapshot = source_future.result()
        products, user_ids = target_future.result()

    return snapshot, build_reference_data(products, user_ids)


def run_migration(databases: MigrationDatabases, settings: MigrationSettings) -> MigrationPlan:
    snapshot, references = read_inputs(databases, settings)
    plan = build_migration_plan(snapshot, references, org_id=settings.new_org_id)

    if settings.dry_run:
        logger.info('Dry run: skipping all writes')
    else:
        with databases.target_session() as session:
            written = write_plan(
                session,
                plan,
                org_id=settings.new_org_id,
                reset=settings.reset_enabled,
                batch_size=settings.batch_size,
                single_transaction=settings.single_transaction,
            )
        logger.info('Wrote %d rows for organization %s', written, settings.new_org_id)

    print_report(plan, print_costs=settings.print_costs, dry_run=settings.dry_run)
    return plan
