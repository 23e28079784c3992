from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy import delete
from sqlalchemy.orm import Session

from purchasing_migration.models import (
    PurchaseOrder,
    PurchaseOrderCost,
    PurchaseOrderItem,
    PurchaseOrderReceipt,
    PurchaseOrderReceiptItem,
    Supplier,
)

if TYPE_CHECKING:
    from purchasing_migration.services.migration_service import MigrationPlan


logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500

# Parents first; reset walks this in reverse.
WRITE_ORDER = (
    Supplier,
    PurchaseOrder,
    PurchaseOrderItem,
    PurchaseOrderCost,
    PurchaseOrderReceipt,
    PurchaseOrderReceiptItem,
)

T = TypeVar('T')


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    if size < 1:
        raise ValueError('Batch size must be at least 1')
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def reset_target(session: Session, *, org_id: str) -> None:
    logger.warning('Clearing existing purchasing rows for organization %s', org_id)
    for model in reversed(WRITE_ORDER):
        result = session.execute(delete(model).where(model.organization_id == org_id))
        logger.info('Deleted %s rows from %s', result.rowcount, model.__tablename__)


def _rows_in_write_order(plan: MigrationPlan) -> list[tuple[type, list]]:
    return [
        (Supplier, plan.suppliers),
        (PurchaseOrder, plan.purchase_orders),
        (PurchaseOrderItem, plan.purchase_order_items),
        (PurchaseOrderCost, plan.costs),
        (PurchaseOrderReceipt, plan.receipts),
        (PurchaseOrderReceiptItem, plan.receipt_items),
    ]


def write_plan(
    session: Session,
    plan: MigrationPlan,
    *,
    org_id: str,
    reset: bool = False,
    batch_size: int = DEFAULT_BATCH_SIZE,
    single_transaction: bool = False,
) -> int:
    """
    Insert the plan's rows parents-first in fixed-size batches.
    By default every batch commits on its own, so a failure leaves earlier batches in place.
    With single_transaction the whole write, reset included, commits once or not at all.
    """
    written = 0
    try:
        if reset:
            reset_target(session, org_id=org_id)
            if not single_transaction:
                session.commit()

        for model, rows in _rows_in_write_order(plan):
            for batch in chunk(rows, batch_size):
                session.add_all(batch)
                session.flush()
                if not single_transaction:
                    session.commit()
                written += len(batch)
                logger.info('Wrote %d rows to %s', len(batch), model.__tablename__)

        if single_transaction:
            session.commit()
    except Exception:
        session.rollback()
        raise
    return written
