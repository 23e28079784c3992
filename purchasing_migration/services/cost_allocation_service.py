"""Apportion shipment-level freight, customs and insurance across purchase orders.

Every allocation row links a quantity of one shipment item to one purchase
order line. A shipment's shared costs are split across its allocation rows
by item value (``quantity_allocated * unit_fob_cost_aud``). When no row in
the shipment has a value, the split falls back to allocated quantity.

Amounts already apportioned in the legacy data (``allocated_*_cost`` on the
allocation row) are added on top of the computed shares. Accumulation is
plain float addition; nothing is rounded here.
"""
from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from purchasing_migration.models import CostType, PurchaseOrderCost
from purchasing_migration.services.mapping_service import amount, synthesized_cost


ALLOCATED_COST_TYPES = (CostType.FREIGHT, CostType.CUSTOMS, CostType.INSURANCE)


@dataclass
class CostTotals:
    freight: float = 0.0
    customs: float = 0.0
    insurance: float = 0.0

    def add(self, cost_type: CostType, value: float) -> None:
        setattr(self, cost_type.value, getattr(self, cost_type.value) + value)

    def get(self, cost_type: CostType) -> float:
        return getattr(self, cost_type.value)


@dataclass(frozen=True)
class ShipmentCosts:
    freight: float
    customs: float
    insurance: float

    @classmethod
    def from_shipment(cls, shipment) -> ShipmentCosts:
        return cls(
            freight=amount(shipment.freight_cost_local),
            customs=amount(shipment.customs_cost_local),
            insurance=amount(shipment.insurance_cost_local),
        )

    @property
    def total(self) -> float:
        return self.freight + self.customs + self.insurance

    def get(self, cost_type: CostType) -> float:
        return getattr(self, cost_type.value)


def allocation_weights(allocations: list, shipment_items_by_id: dict) -> list[float]:
    """Weight of each allocation within its shipment; the weights sum to 1 unless all are 0."""
    values = []
    for allocation in allocations:
        shipment_item = shipment_items_by_id.get(allocation.shipment_item_id)
        unit_value = amount(shipment_item.unit_fob_cost_aud) if shipment_item else 0.0
        values.append(amount(allocation.quantity_allocated) * unit_value)

    total_value = sum(values)
    if total_value > 0:
        return [value / total_value for value in values]

    quantities = [amount(allocation.quantity_allocated) for allocation in allocations]
    total_quantity = sum(quantities)
    if total_quantity > 0:
        return [qty / total_quantity for qty in quantities]
    return [0.0 for _ in allocations]


def group_allocations_by_shipment(allocations: Iterable, shipment_items_by_id: dict) -> dict[str, list]:
    grouped: dict[str, list] = {}
    for allocation in allocations:
        shipment_item = shipment_items_by_id.get(allocation.shipment_item_id)
        if shipment_item is None:
            continue
        grouped.setdefault(shipment_item.shipment_id, []).append(allocation)
    return grouped


def allocate_shipment_costs(
    *,
    shipments: Iterable,
    shipment_items: Iterable,
    allocations: Iterable,
    purchase_order_ids: set[str],
) -> dict[str, CostTotals]:
    allocations = list(allocations)
    shipment_items_by_id = {item.id: item for item in shipment_items}
    shipments_by_id = {shipment.id: shipment for shipment in shipments}
    totals_by_po: dict[str, CostTotals] = {}

    def add(purchase_order_id: str, cost_type: CostType, value: float) -> None:
        if purchase_order_id not in purchase_order_ids or value <= 0:
            return
        totals_by_po.setdefault(purchase_order_id, CostTotals()).add(cost_type, value)

    for allocation in allocations:
        add(allocation.purchase_order_id, CostType.FREIGHT, amount(allocation.allocated_freight_cost))
        add(allocation.purchase_order_id, CostType.CUSTOMS, amount(allocation.allocated_customs_cost))
        add(allocation.purchase_order_id, CostType.INSURANCE, amount(allocation.allocated_insurance_cost))

    for shipment_id, shipment_allocations in group_allocations_by_shipment(allocations, shipment_items_by_id).items():
        shipment = shipments_by_id.get(shipment_id)
        if shipment is None:
            continue
        costs = ShipmentCosts.from_shipment(shipment)
        if costs.total == 0:
            continue
        weights = allocation_weights(shipment_allocations, shipment_items_by_id)
        for allocation, weight in zip(shipment_allocations, weights):
            for cost_type in ALLOCATED_COST_TYPES:
                add(allocation.purchase_order_id, cost_type, costs.get(cost_type) * weight)

    return totals_by_po


def build_allocated_cost_rows(
    totals_by_po: dict[str, CostTotals],
    *,
    org_id: str,
    now: datetime | None = None,
    id_factory: Callable[[], str] | None = None,
) -> list[PurchaseOrderCost]:
    now = now or datetime.now(timezone.utc)
    id_factory = id_factory or (lambda: str(uuid.uuid4()))
    rows: list[PurchaseOrderCost] = []
    for purchase_order_id, totals in totals_by_po.items():
        for cost_type in ALLOCATED_COST_TYPES:
            value = totals.get(cost_type)
            if value <= 0:
                continue
            rows.append(
                synthesized_cost(
                    org_id=org_id,
                    purchase_order_id=purchase_order_id,
                    cost_type=cost_type,
                    value=value,
                    description=f'Allocated {cost_type.value} cost (shipments)',
                    cost_id=id_factory(),
                    created_at=now,
                )
            )
    return rows
