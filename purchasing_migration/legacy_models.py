"""Read-only models for the legacy procurement schema.

Money columns are mapped as floats (``asdecimal=False``) because cost
allocation works in floating point end to end.
"""
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, Numeric, Text
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class LegacyBase(DeclarativeBase):
    pass


def _money():
    return Numeric(14, 4, asdecimal=False)


class LegacySupplier(LegacyBase):
    __tablename__ = 'suppliers'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    contact_name: Mapped[str | None] = mapped_column(Text)
    email: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(Text)
    default_currency: Mapped[str | None] = mapped_column(Text)
    payment_terms: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str | None] = mapped_column(Text)
    address_line1: Mapped[str | None] = mapped_column(Text)
    address_line2: Mapped[str | None] = mapped_column(Text)
    city: Mapped[str | None] = mapped_column(Text)
    state: Mapped[str | None] = mapped_column(Text)
    postal_code: Mapped[str | None] = mapped_column(Text)
    country: Mapped[str | None] = mapped_column(Text)
    created_by_user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    updated_by_user_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class LegacyPurchaseOrder(LegacyBase):
    __tablename__ = 'purchase_orders'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    supplier_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    purchase_order_number: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str | None] = mapped_column(Text)
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    expected_delivery_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)
    terms: Mapped[str | None] = mapped_column(Text)
    subtotal_amount: Mapped[float | None] = mapped_column(_money())
    total_additional_costs_estimated: Mapped[float | None] = mapped_column(_money())
    total_additional_costs_actual: Mapped[float | None] = mapped_column(_money())
    grand_total_amount_estimated: Mapped[float | None] = mapped_column(_money())
    grand_total_amount_actual: Mapped[float | None] = mapped_column(_money())
    currency: Mapped[str | None] = mapped_column(Text)
    goods_receipt_status: Mapped[str | None] = mapped_column(Text)
    created_by_user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    updated_by_user_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False))
    issued_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class LegacyPurchaseOrderLineItem(LegacyBase):
    __tablename__ = 'purchase_order_line_items'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    purchase_order_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    product_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    quantity_ordered: Mapped[int | None] = mapped_column(Integer)
    unit_cost: Mapped[float | None] = mapped_column(_money())
    line_total: Mapped[float | None] = mapped_column(_money())
    quantity_received_overall: Mapped[int | None] = mapped_column(Integer)
    expected_delivery_date: Mapped[date | None] = mapped_column(Date)
    landed_unit_cost: Mapped[float | None] = mapped_column(_money())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class LegacyPurchaseOrderAdditionalCost(LegacyBase):
    __tablename__ = 'purchase_order_additional_costs'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    purchase_order_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    type: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    estimated_amount: Mapped[float | None] = mapped_column(_money())
    actual_amount: Mapped[float | None] = mapped_column(_money())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class LegacyShipment(LegacyBase):
    __tablename__ = 'shipments'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    shipment_reference: Mapped[str] = mapped_column(Text, nullable=False)
    supplier_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False))
    arrival_date: Mapped[date | None] = mapped_column(Date)
    received_by_user_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False))
    warehouse_location: Mapped[str | None] = mapped_column(Text)
    freight_provider: Mapped[str | None] = mapped_column(Text)
    tracking_number: Mapped[str | None] = mapped_column(Text)
    customs_clearance_date: Mapped[date | None] = mapped_column(Date)
    freight_cost_local: Mapped[float | None] = mapped_column(_money())
    freight_currency: Mapped[str | None] = mapped_column(Text)
    freight_exchange_rate: Mapped[float | None] = mapped_column(Numeric(14, 6, asdecimal=False))
    customs_cost_local: Mapped[float | None] = mapped_column(_money())
    insurance_cost_local: Mapped[float | None] = mapped_column(_money())
    status: Mapped[str | None] = mapped_column(Text)
    stock_in_status: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    total_landed_cost_aud: Mapped[float | None] = mapped_column(_money())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class LegacyShipmentItem(LegacyBase):
    __tablename__ = 'shipment_items'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    shipment_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    product_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False))
    product_sku_snapshot: Mapped[str | None] = mapped_column(Text)
    product_name_snapshot: Mapped[str | None] = mapped_column(Text)
    quantity_received: Mapped[int | None] = mapped_column(Integer)
    quantity_stocked_in: Mapped[int | None] = mapped_column(Integer)
    unit_fob_cost_aud: Mapped[float | None] = mapped_column(_money())
    unit_landed_cost_aud: Mapped[float | None] = mapped_column(_money())
    serial_numbers: Mapped[list[str] | None] = mapped_column(ARRAY(Text))
    batch_number: Mapped[str | None] = mapped_column(Text)
    expiry_date: Mapped[date | None] = mapped_column(Date)
    stock_in_status: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class LegacyShipmentAllocation(LegacyBase):
    __tablename__ = 'shipment_po_allocations'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    shipment_item_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    purchase_order_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    purchase_order_line_item_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    quantity_allocated: Mapped[int | None] = mapped_column(Integer)
    allocation_basis: Mapped[str | None] = mapped_column(Text)
    allocation_percentage: Mapped[float | None] = mapped_column(Numeric(9, 4, asdecimal=False))
    allocated_freight_cost: Mapped[float | None] = mapped_column(_money())
    allocated_customs_cost: Mapped[float | None] = mapped_column(_money())
    allocated_insurance_cost: Mapped[float | None] = mapped_column(_money())
    freight_cost_variance: Mapped[float | None] = mapped_column(_money())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class LegacyGoodsReceipt(LegacyBase):
    __tablename__ = 'goods_receipts'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    organization_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    purchase_order_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    receipt_number: Mapped[str] = mapped_column(Text, nullable=False)
    receipt_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    received_by_user_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False))
    status: Mapped[str | None] = mapped_column(Text)
    stock_in_status: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    shipment_reference: Mapped[str | None] = mapped_column(Text)
    freight_provider: Mapped[str | None] = mapped_column(Text)
    tracking_number: Mapped[str | None] = mapped_column(Text)
    delivery_confirmed_date: Mapped[date | None] = mapped_column(Date)
    shipment_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False))
    freight_cost_local: Mapped[float | None] = mapped_column(_money())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class LegacyGoodsReceiptLineItem(LegacyBase):
    __tablename__ = 'goods_receipt_line_items'

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    goods_receipt_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    purchase_order_line_item_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False)
    product_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False))
    product_sku_snapshot: Mapped[str | None] = mapped_column(Text)
    product_name_snapshot: Mapped[str | None] = mapped_column(Text)
    quantity_ordered_snapshot: Mapped[int | None] = mapped_column(Integer)
    quantity_received: Mapped[int | None] = mapped_column(Integer)
    unit_landed_cost: Mapped[float | None] = mapped_column(_money())
    total_landed_cost: Mapped[float | None] = mapped_column(_money())
    serials_received: Mapped[list[str] | None] = mapped_column(ARRAY(Text))
    location_id: Mapped[str | None] = mapped_column(UUID(as_uuid=False))
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
