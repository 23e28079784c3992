from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from purchasing_migration.models import Product, User


logger = logging.getLogger(__name__)


class MissingFallbackUserError(RuntimeError):
    pass


@dataclass(frozen=True)
class ProductRef:
    id: str
    name: str
    sku: str | None
    description: str | None


@dataclass(frozen=True)
class ReferenceData:
    products_by_id: dict[str, ProductRef]
    user_ids: frozenset[str]
    fallback_user_id: str

    def resolve_actor(self, user_id: str | None) -> str | None:
        if user_id and user_id in self.user_ids:
            return user_id
        return None

    def resolve_required_actor(self, user_id: str | None) -> str:
        return self.resolve_actor(user_id) or self.fallback_user_id


def load_reference_rows(session: Session, *, org_id: str) -> tuple[list[ProductRef], list[str]]:
    product_rows = session.execute(
        select(Product.id, Product.name, Product.sku, Product.description).where(Product.organization_id == org_id)
    ).all()
    user_ids = session.execute(
        select(User.id).where(User.organization_id == org_id).order_by(User.created_at.asc(), User.id.asc())
    ).scalars().all()
    products = [
        ProductRef(id=str(row.id), name=row.name, sku=row.sku, description=row.description) for row in product_rows
    ]
    logger.info('Loaded target references: products=%d users=%d', len(products), len(user_ids))
    return products, [str(user_id) for user_id in user_ids]


def build_reference_data(products: Iterable[ProductRef], user_ids: list[str]) -> ReferenceData:
    if not user_ids:
        raise MissingFallbackUserError('No users found in target database to use as fallback.')
    return ReferenceData(
        products_by_id={product.id: product for product in products},
        user_ids=frozenset(user_ids),
        fallback_user_id=user_ids[0],
    )
