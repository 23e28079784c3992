from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class SupplierStatus(str, Enum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'


class PaymentTerms(str, Enum):
    NET_15 = 'net_15'
    NET_30 = 'net_30'
    NET_45 = 'net_45'
    NET_60 = 'net_60'
    COD = 'cod'
    PREPAID = 'prepaid'


class PurchaseOrderStatus(str, Enum):
    ORDERED = 'ordered'
    RECEIVED = 'received'
    CLOSED = 'closed'


class CostType(str, Enum):
    FREIGHT = 'freight'
    CUSTOMS = 'customs'
    INSURANCE = 'insurance'
    DUTY = 'duty'
    HANDLING = 'handling'
    OTHER = 'other'


class AllocationMethod(str, Enum):
    # Migrated rows are always tagged by_value, including quantity-weighted shares.
    BY_VALUE = 'by_value'
    BY_QUANTITY = 'by_quantity'


class ReceiptStatus(str, Enum):
    PENDING_INSPECTION = 'pending_inspection'
    ACCEPTED = 'accepted'


class InspectionRequirement(str, Enum):
    YES = 'yes'
    NO = 'no'


class ReceiptItemCondition(str, Enum):
    NEW = 'new'
    REFURBISHED = 'refurbished'
    USED = 'used'
    DAMAGED = 'damaged'


def _enum(enum_cls: type[Enum], name: str) -> SQLEnum:
    return SQLEnum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])


def _money():
    return Numeric(14, 4, asdecimal=False)


class Product(Base):
    __tablename__ = 'products'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    sku: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)


class User(Base):
    __tablename__ = 'users'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class Supplier(Base):
    __tablename__ = 'suppliers'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    legal_name: Mapped[str | None] = mapped_column(Text)
    email: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(Text)
    status: Mapped[SupplierStatus] = mapped_column(_enum(SupplierStatus, 'supplier_status'), nullable=False)
    supplier_type: Mapped[str | None] = mapped_column(Text)
    primary_contact_name: Mapped[str | None] = mapped_column(Text)
    primary_contact_email: Mapped[str | None] = mapped_column(Text)
    primary_contact_phone: Mapped[str | None] = mapped_column(Text)
    billing_address: Mapped[dict | None] = mapped_column(JSONB)
    shipping_address: Mapped[dict | None] = mapped_column(JSONB)
    payment_terms: Mapped[PaymentTerms | None] = mapped_column(_enum(PaymentTerms, 'payment_terms'))
    currency: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    total_purchase_orders: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_purchase_value: Mapped[float | None] = mapped_column(_money())
    average_order_value: Mapped[float | None] = mapped_column(_money())
    first_order_date: Mapped[date | None] = mapped_column(Date)
    last_order_date: Mapped[date | None] = mapped_column(Date)
    created_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    updated_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class PurchaseOrder(Base):
    __tablename__ = 'purchase_orders'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    po_number: Mapped[str] = mapped_column(Text, nullable=False)
    supplier_id: Mapped[str] = mapped_column(UUID(as_uuid=False), ForeignKey('suppliers.id'), nullable=False)
    status: Mapped[PurchaseOrderStatus] = mapped_column(
        _enum(PurchaseOrderStatus, 'purchase_order_status'),
        nullable=False,
    )
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    required_date: Mapped[date | None] = mapped_column(Date)
    expected_delivery_date: Mapped[date | None] = mapped_column(Date)
    actual_delivery_date: Mapped[date | None] = mapped_column(Date)
    subtotal: Mapped[float] = mapped_column(_money(), nullable=False)
    tax_amount: Mapped[float] = mapped_column(_money(), nullable=False)
    shipping_amount: Mapped[float] = mapped_column(_money(), nullable=False)
    discount_amount: Mapped[float] = mapped_column(_money(), nullable=False)
    total_amount: Mapped[float] = mapped_column(_money(), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False)
    payment_terms: Mapped[PaymentTerms | None] = mapped_column(_enum(PaymentTerms, 'payment_terms'))
    ordered_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    ordered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    closed_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    notes: Mapped[str | None] = mapped_column(Text)
    internal_notes: Mapped[str | None] = mapped_column(Text)
    meta: Mapped[dict | None] = mapped_column('metadata', JSONB)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    updated_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class PurchaseOrderItem(Base):
    __tablename__ = 'purchase_order_items'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    purchase_order_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey('purchase_orders.id', ondelete='CASCADE'), nullable=False
    )
    product_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('products.id'))
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)
    product_name: Mapped[str] = mapped_column(Text, nullable=False)
    product_sku: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_of_measure: Mapped[str | None] = mapped_column(Text)
    unit_price: Mapped[float] = mapped_column(_money(), nullable=False)
    discount_percent: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    tax_rate: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    line_total: Mapped[float] = mapped_column(_money(), nullable=False)
    quantity_received: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_rejected: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_pending: Mapped[int] = mapped_column(Integer, nullable=False)
    expected_delivery_date: Mapped[date | None] = mapped_column(Date)
    actual_delivery_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class PurchaseOrderCost(Base):
    __tablename__ = 'purchase_order_costs'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    purchase_order_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey('purchase_orders.id', ondelete='CASCADE'), nullable=False
    )
    cost_type: Mapped[CostType] = mapped_column(_enum(CostType, 'purchase_order_cost_type'), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    amount: Mapped[float] = mapped_column(_money(), nullable=False)
    currency: Mapped[str] = mapped_column(Text, nullable=False)
    allocation_method: Mapped[AllocationMethod] = mapped_column(
        _enum(AllocationMethod, 'cost_allocation_method'),
        nullable=False,
    )
    is_included_in_total: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    supplier_invoice_number: Mapped[str | None] = mapped_column(Text)
    reference_number: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    updated_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class PurchaseOrderReceipt(Base):
    __tablename__ = 'purchase_order_receipts'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    purchase_order_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey('purchase_orders.id', ondelete='CASCADE'), nullable=False
    )
    receipt_number: Mapped[str] = mapped_column(Text, nullable=False)
    received_by: Mapped[str] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'), nullable=False)
    received_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    carrier: Mapped[str | None] = mapped_column(Text)
    tracking_number: Mapped[str | None] = mapped_column(Text)
    delivery_reference: Mapped[str | None] = mapped_column(Text)
    total_items_expected: Mapped[int] = mapped_column(Integer, nullable=False)
    total_items_received: Mapped[int] = mapped_column(Integer, nullable=False)
    total_items_accepted: Mapped[int] = mapped_column(Integer, nullable=False)
    total_items_rejected: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[ReceiptStatus] = mapped_column(_enum(ReceiptStatus, 'receipt_status'), nullable=False)
    inspection_required: Mapped[InspectionRequirement] = mapped_column(
        _enum(InspectionRequirement, 'inspection_required'), nullable=False, default=InspectionRequirement.NO
    )
    inspection_completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    inspection_completed_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    quality_notes: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    updated_by: Mapped[str | None] = mapped_column(UUID(as_uuid=False), ForeignKey('users.id'))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class PurchaseOrderReceiptItem(Base):
    __tablename__ = 'purchase_order_receipt_items'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    receipt_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey('purchase_order_receipts.id', ondelete='CASCADE'), nullable=False
    )
    purchase_order_item_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False), ForeignKey('purchase_order_items.id'), nullable=False
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_expected: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_received: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_accepted: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_rejected: Mapped[int] = mapped_column(Integer, nullable=False)
    condition: Mapped[ReceiptItemCondition | None] = mapped_column(_enum(ReceiptItemCondition, 'condition'))
    rejection_reason: Mapped[str | None] = mapped_column(Text)
    quality_notes: Mapped[str | None] = mapped_column(Text)
    warehouse_location: Mapped[str | None] = mapped_column(Text)
    bin_number: Mapped[str | None] = mapped_column(Text)
    lot_number: Mapped[str | None] = mapped_column(Text)
    serial_numbers: Mapped[list[str] | None] = mapped_column(ARRAY(Text))
    expiry_date: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
