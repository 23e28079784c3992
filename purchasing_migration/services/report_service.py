from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from purchasing_migration.services.migration_service import MigrationPlan


def cost_breakdown(costs: Iterable) -> dict[str, dict[str, float]]:
    summary: dict[str, dict[str, float]] = {}
    for cost in costs:
        by_type = summary.setdefault(cost.purchase_order_id, {})
        cost_type = getattr(cost.cost_type, 'value', cost.cost_type)
        by_type[cost_type] = by_type.get(cost_type, 0.0) + float(cost.amount or 0)
    return summary


def format_cost_breakdown(costs: Iterable) -> list[str]:
    lines = ['PO Cost Breakdown (by purchase_order_id):']
    for purchase_order_id, totals in cost_breakdown(costs).items():
        parts = ', '.join(f'{cost_type}: {value:.2f}' for cost_type, value in totals.items())
        lines.append(f'{purchase_order_id} -> {parts}')
    return lines


def format_summary(plan: MigrationPlan) -> list[str]:
    lines = [
        'Summary:',
        f'Suppliers: {len(plan.suppliers)}',
        f'Purchase Orders: {len(plan.purchase_orders)}',
        f'PO Items: {len(plan.purchase_order_items)}',
        f'PO Costs: {len(plan.costs)}',
        f'Receipts: {len(plan.receipts)}',
        f'Receipt Items: {len(plan.receipt_items)}',
    ]
    if plan.skipped_purchase_order_ids:
        lines.append(f'Skipped POs (missing supplier): {len(plan.skipped_purchase_order_ids)}')
    return lines


def print_report(plan: MigrationPlan, *, print_costs: bool = False, dry_run: bool = False) -> None:
    if dry_run:
        print('DRY_RUN=1: no data written.')
    if print_costs and plan.costs:
        for line in format_cost_breakdown(plan.costs):
            print(line)
    for line in format_summary(plan):
        print(line)
