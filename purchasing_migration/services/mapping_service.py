from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime

from purchasing_migration.models import (
    AllocationMethod,
    CostType,
    PaymentTerms,
    PurchaseOrder,
    PurchaseOrderCost,
    PurchaseOrderItem,
    PurchaseOrderStatus,
    ReceiptStatus,
    Supplier,
    SupplierStatus,
)
from purchasing_migration.services.reference_service import ReferenceData


DEFAULT_CURRENCY = 'AUD'
DEFAULT_PAYMENT_TERMS = PaymentTerms.NET_30
UNKNOWN_PRODUCT_NAME = 'Unknown product'

_WHITESPACE_RE = re.compile(r'\s+')

_PURCHASE_ORDER_STATUS_BY_LEGACY = {
    'ORDERED': PurchaseOrderStatus.ORDERED,
    'RECEIVED': PurchaseOrderStatus.RECEIVED,
    'CLOSED': PurchaseOrderStatus.CLOSED,
}

_RECEIPT_STATUS_BY_LEGACY = {
    'COMPLETED': ReceiptStatus.ACCEPTED,
    'PENDING': ReceiptStatus.PENDING_INSPECTION,
}

_DIRECT_COST_TYPES = {
    CostType.FREIGHT.value,
    CostType.CUSTOMS.value,
    CostType.INSURANCE.value,
    CostType.DUTY.value,
    CostType.HANDLING.value,
}

_ADDRESS_FIELDS = (
    ('line1', 'address_line1'),
    ('line2', 'address_line2'),
    ('city', 'city'),
    ('state', 'state'),
    ('postalCode', 'postal_code'),
    ('country', 'country'),
)


def amount(value) -> float:
    return float(value or 0)


def quantity(value) -> int:
    return int(value or 0)


def _isoformat(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def map_supplier_status(status: str | None) -> SupplierStatus:
    if not status:
        return SupplierStatus.ACTIVE
    return SupplierStatus.ACTIVE if status.upper() == 'ACTIVE' else SupplierStatus.INACTIVE


def map_payment_terms(value: str | None) -> PaymentTerms:
    if not value:
        return DEFAULT_PAYMENT_TERMS
    normalized = _WHITESPACE_RE.sub('_', value.lower())
    try:
        return PaymentTerms(normalized)
    except ValueError:
        return DEFAULT_PAYMENT_TERMS


def map_purchase_order_status(status: str | None) -> PurchaseOrderStatus:
    if not status:
        return PurchaseOrderStatus.ORDERED
    return _PURCHASE_ORDER_STATUS_BY_LEGACY.get(status.upper(), PurchaseOrderStatus.ORDERED)


def map_receipt_status(status: str | None) -> ReceiptStatus:
    if not status:
        return ReceiptStatus.PENDING_INSPECTION
    return _RECEIPT_STATUS_BY_LEGACY.get(status.upper(), ReceiptStatus.PENDING_INSPECTION)


def map_cost_type(value: str | None) -> CostType:
    key = (value or '').lower()
    return CostType(key) if key in _DIRECT_COST_TYPES else CostType.OTHER


def build_address(supplier) -> dict | None:
    values = {key: getattr(supplier, attr) for key, attr in _ADDRESS_FIELDS}
    if not any(value and value.strip() for value in values.values()):
        return None
    return values


def map_supplier(supplier, *, org_id: str, references: ReferenceData) -> Supplier:
    return Supplier(
        id=supplier.id,
        organization_id=org_id,
        name=supplier.name,
        legal_name=None,
        email=supplier.email,
        phone=supplier.phone,
        status=map_supplier_status(supplier.status),
        supplier_type=None,
        primary_contact_name=supplier.contact_name,
        primary_contact_email=supplier.email,
        primary_contact_phone=supplier.phone,
        billing_address=build_address(supplier),
        shipping_address=None,
        payment_terms=map_payment_terms(supplier.payment_terms),
        currency=supplier.default_currency or DEFAULT_CURRENCY,
        notes=supplier.notes,
        total_purchase_orders=0,
        total_purchase_value=None,
        average_order_value=None,
        first_order_date=None,
        last_order_date=None,
        created_by=references.resolve_actor(supplier.created_by_user_id),
        updated_by=references.resolve_actor(supplier.updated_by_user_id),
        created_at=supplier.created_at,
        updated_at=supplier.updated_at,
    )


def _closed_by(purchase_order, references: ReferenceData) -> str | None:
    if not purchase_order.closed_at:
        return None
    candidate = purchase_order.updated_by_user_id or purchase_order.created_by_user_id
    return references.resolve_required_actor(candidate)


def map_purchase_order(purchase_order, *, org_id: str, references: ReferenceData) -> PurchaseOrder:
    subtotal = amount(purchase_order.subtotal_amount)
    creator = references.resolve_actor(purchase_order.created_by_user_id)
    return PurchaseOrder(
        id=purchase_order.id,
        organization_id=org_id,
        po_number=purchase_order.purchase_order_number,
        supplier_id=purchase_order.supplier_id,
        status=map_purchase_order_status(purchase_order.status),
        order_date=purchase_order.order_date,
        required_date=None,
        expected_delivery_date=purchase_order.expected_delivery_date,
        actual_delivery_date=None,
        subtotal=subtotal,
        tax_amount=0.0,
        shipping_amount=0.0,
        discount_amount=0.0,
        total_amount=subtotal,
        currency=purchase_order.currency or DEFAULT_CURRENCY,
        payment_terms=None,
        ordered_by=creator,
        ordered_at=purchase_order.issued_at,
        closed_by=_closed_by(purchase_order, references),
        closed_at=purchase_order.closed_at,
        notes=purchase_order.notes,
        internal_notes=purchase_order.terms,
        meta={
            'legacy': {
                'total_additional_costs_estimated': purchase_order.total_additional_costs_estimated,
                'total_additional_costs_actual': purchase_order.total_additional_costs_actual,
                'grand_total_amount_estimated': purchase_order.grand_total_amount_estimated,
                'grand_total_amount_actual': purchase_order.grand_total_amount_actual,
                'goods_receipt_status': purchase_order.goods_receipt_status,
                'cancelled_at': _isoformat(purchase_order.cancelled_at),
            }
        },
        version=1,
        created_by=creator,
        updated_by=references.resolve_actor(purchase_order.updated_by_user_id),
        created_at=purchase_order.created_at,
        updated_at=purchase_order.updated_at,
        deleted_at=None,
    )


def line_item_sort_key(item) -> tuple:
    return (item.created_at, str(item.id))


def map_purchase_order_items(
    items: Iterable,
    *,
    purchase_order_id: str,
    org_id: str,
    references: ReferenceData,
) -> list[PurchaseOrderItem]:
    """Map one purchase order's legacy line items, numbering lines by creation order."""
    rows: list[PurchaseOrderItem] = []
    for index, item in enumerate(sorted(items, key=line_item_sort_key), start=1):
        product = references.products_by_id.get(item.product_id)
        ordered = quantity(item.quantity_ordered)
        received = quantity(item.quantity_received_overall)
        rows.append(
            PurchaseOrderItem(
                id=item.id,
                organization_id=org_id,
                purchase_order_id=purchase_order_id,
                product_id=product.id if product else None,
                line_number=index,
                product_name=product.name if product else UNKNOWN_PRODUCT_NAME,
                product_sku=product.sku if product else None,
                description=product.description if product else None,
                quantity=ordered,
                unit_of_measure='each',
                unit_price=amount(item.unit_cost),
                discount_percent=0.0,
                tax_rate=0.0,
                line_total=amount(item.line_total),
                quantity_received=received,
                quantity_rejected=0,
                quantity_pending=max(0, ordered - received),
                expected_delivery_date=item.expected_delivery_date,
                actual_delivery_date=None,
                notes=None,
                created_at=item.created_at,
                updated_at=item.updated_at,
            )
        )
    return rows


def map_additional_cost(cost, *, org_id: str) -> PurchaseOrderCost:
    cost_type = map_cost_type(cost.type)
    value = cost.actual_amount if cost.actual_amount is not None else cost.estimated_amount
    description = cost.description
    if cost_type == CostType.OTHER and cost.type:
        # Keep the legacy label, the target enum has no room for it.
        description = f"{cost.type}: {cost.description or ''}".strip()
    return PurchaseOrderCost(
        id=cost.id,
        organization_id=org_id,
        purchase_order_id=cost.purchase_order_id,
        cost_type=cost_type,
        description=description,
        amount=amount(value),
        currency=DEFAULT_CURRENCY,
        allocation_method=AllocationMethod.BY_VALUE,
        is_included_in_total=True,
        supplier_invoice_number=None,
        reference_number=None,
        notes=None,
        version=1,
        created_by=None,
        updated_by=None,
        created_at=cost.created_at,
        updated_at=cost.updated_at,
    )


def synthesized_cost(
    *,
    org_id: str,
    purchase_order_id: str,
    cost_type: CostType,
    value: float,
    description: str,
    cost_id: str,
    created_at: datetime,
    updated_at: datetime | None = None,
) -> PurchaseOrderCost:
    return PurchaseOrderCost(
        id=cost_id,
        organization_id=org_id,
        purchase_order_id=purchase_order_id,
        cost_type=cost_type,
        description=description,
        amount=value,
        currency=DEFAULT_CURRENCY,
        allocation_method=AllocationMethod.BY_VALUE,
        is_included_in_total=True,
        supplier_invoice_number=None,
        reference_number=None,
        notes=None,
        version=1,
        created_by=None,
        updated_by=None,
        created_at=created_at,
        updated_at=updated_at or created_at,
    )
