from __future__ import annotations

from datetime import date, datetime, timezone
from types import SimpleNamespace

from purchasing_migration.services.reference_service import ProductRef, ReferenceData, build_reference_data


CREATED = datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)
UPDATED = datetime(2024, 1, 11, 9, 0, tzinfo=timezone.utc)
USER_ID = 'user-1'
OTHER_USER_ID = 'user-2'


def references(*, user_ids: list[str] | None = None, products: list[ProductRef] | None = None) -> ReferenceData:
    return build_reference_data(
        products or [ProductRef(id='product-1', name='Battery 10kWh', sku='BAT-10', description='Home battery')],
        user_ids if user_ids is not None else [USER_ID, OTHER_USER_ID],
    )


def supplier(**overrides) -> SimpleNamespace:
    values = dict(
        id='supplier-1',
        organization_id='old-org',
        name='Sun Parts',
        contact_name='Dana',
        email='dana@sunparts.example',
        phone='0400 000 000',
        default_currency='AUD',
        payment_terms='Net 30',
        notes=None,
        status='ACTIVE',
        address_line1=None,
        address_line2=None,
        city=None,
        state=None,
        postal_code=None,
        country=None,
        created_by_user_id=USER_ID,
        updated_by_user_id=None,
        created_at=CREATED,
        updated_at=UPDATED,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def purchase_order(**overrides) -> SimpleNamespace:
    values = dict(
        id='po-1',
        organization_id='old-org',
        supplier_id='supplier-1',
        purchase_order_number='PO-1001',
        status='ORDERED',
        order_date=date(2024, 1, 10),
        expected_delivery_date=None,
        notes=None,
        terms=None,
        subtotal_amount=1000.0,
        total_additional_costs_estimated=150.0,
        total_additional_costs_actual=None,
        grand_total_amount_estimated=1150.0,
        grand_total_amount_actual=None,
        currency='AUD',
        goods_receipt_status='PENDING',
        created_by_user_id=USER_ID,
        updated_by_user_id=None,
        issued_at=CREATED,
        closed_at=None,
        cancelled_at=None,
        created_at=CREATED,
        updated_at=UPDATED,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def line_item(**overrides) -> SimpleNamespace:
    values = dict(
        id='line-1',
        purchase_order_id='po-1',
        product_id='product-1',
        quantity_ordered=10,
        unit_cost=100.0,
        line_total=1000.0,
        quantity_received_overall=0,
        expected_delivery_date=None,
        landed_unit_cost=None,
        created_at=CREATED,
        updated_at=UPDATED,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def additional_cost(**overrides) -> SimpleNamespace:
    values = dict(
        id='cost-1',
        purchase_order_id='po-1',
        type='FREIGHT',
        description='Sea freight',
        estimated_amount=80.0,
        actual_amount=None,
        created_at=CREATED,
        updated_at=UPDATED,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def shipment(**overrides) -> SimpleNamespace:
    values = dict(
        id='shipment-1',
        organization_id='old-org',
        shipment_reference='SH-1',
        supplier_id='supplier-1',
        arrival_date=date(2024, 2, 1),
        received_by_user_id=USER_ID,
        warehouse_location='Main',
        freight_provider='Carrier Co',
        tracking_number='TRK-1',
        freight_cost_local=0.0,
        customs_cost_local=0.0,
        insurance_cost_local=0.0,
        status='COMPLETED',
        notes=None,
        created_at=CREATED,
        updated_at=UPDATED,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def shipment_item(**overrides) -> SimpleNamespace:
    values = dict(
        id='shipment-item-1',
        shipment_id='shipment-1',
        product_id='product-1',
        quantity_received=10,
        unit_fob_cost_aud=20.0,
        serial_numbers=None,
        batch_number='LOT-7',
        expiry_date=None,
        created_at=CREATED,
        updated_at=UPDATED,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def allocation(**overrides) -> SimpleNamespace:
    values = dict(
        id='allocation-1',
        shipment_item_id='shipment-item-1',
        purchase_order_id='po-1',
        purchase_order_line_item_id='line-1',
        quantity_allocated=10,
        allocated_freight_cost=None,
        allocated_customs_cost=None,
        allocated_insurance_cost=None,
        created_at=CREATED,
        updated_at=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def goods_receipt(**overrides) -> SimpleNamespace:
    values = dict(
        id='gr-1',
        organization_id='old-org',
        purchase_order_id='po-1',
        receipt_number='GR-1',
        receipt_date=CREATED,
        received_by_user_id=USER_ID,
        status='COMPLETED',
        notes=None,
        shipment_reference=None,
        freight_provider=None,
        tracking_number=None,
        shipment_id=None,
        freight_cost_local=None,
        created_at=CREATED,
        updated_at=UPDATED,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def goods_receipt_item(**overrides) -> SimpleNamespace:
    values = dict(
        id='gr-item-1',
        goods_receipt_id='gr-1',
        purchase_order_line_item_id='line-1',
        quantity_ordered_snapshot=10,
        quantity_received=4,
        serials_received=None,
        notes=None,
        created_at=CREATED,
        updated_at=UPDATED,
    )
    values.update(overrides)
    return SimpleNamespace(**values)
