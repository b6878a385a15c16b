"""
Typed access to the collections kept in a RecordStore.

Each repository owns the shape of one collection. Writes are whole
collection read-modify-write; reads go through the legacy adapters so rows
written by older clients come back as canonical models. Missing records are
reported as ``None`` or an empty list, never as an exception.
"""

import logging
import uuid
from typing import Optional

from pydantic import ValidationError

from app.legacy import ORDERS_KEY, PRODUCTS_KEY, load_records, upgrade_order, upgrade_product
from app.models import Order, Product, ProductCreate, UserProfile
from app.store import RecordStore

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


class ProductRepository:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def add_product(self, product: ProductCreate) -> Product:
        created = Product(id=new_id(), **product.model_dump())
        rows = self.store.read_collection(PRODUCTS_KEY)
        rows.append(created.to_record())
        self.store.write(PRODUCTS_KEY, rows)
        return created

    def get_products(self) -> list[Product]:
        return load_records(self.store, PRODUCTS_KEY, upgrade_product)

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.get_products() if p.id == product_id), None)

    def get_seller_products(self, seller_id: str) -> list[Product]:
        return [p for p in self.get_products() if p.seller_id == seller_id]

    def remove_product(self, product_id: str) -> None:
        rows = [
            row for row in self.store.read_collection(PRODUCTS_KEY)
            if not (
                isinstance(row, dict)
                and row.get("id") is not None
                and str(row["id"]) == product_id
            )
        ]
        self.store.write(PRODUCTS_KEY, rows)


class OrderRepository:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def save_order(self, order: Order) -> None:
        rows = self.store.read_collection(ORDERS_KEY)
        rows.append(order.to_record())
        self.store.write(ORDERS_KEY, rows)

    def get_orders(self) -> list[Order]:
        return load_records(self.store, ORDERS_KEY, upgrade_order)

    def get_order(self, order_id: str) -> Optional[Order]:
        return next((o for o in self.get_orders() if o.id == order_id), None)

    def get_buyer_orders(self, buyer_id: str) -> list[Order]:
        return [o for o in self.get_orders() if o.buyer_id == buyer_id]

    def get_seller_orders(self, seller_id: str) -> list[Order]:
        return [o for o in self.get_orders() if o.seller_id == seller_id]


class ProfileRepository:
    def __init__(self, store: RecordStore) -> None:
        self.store = store

    @staticmethod
    def key(user_id: str) -> str:
        return f"profile_{user_id}"

    def save_user_profile(self, profile: UserProfile) -> None:
        self.store.write(self.key(profile.id), profile.to_record())

    def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        raw = self.store.read(self.key(user_id))
        if not isinstance(raw, dict):
            return None
        try:
            return UserProfile.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Discarding invalid profile %r: %s", user_id, exc)
            return None


class Repositories:
    """The data-access object handed to every consumer of the store."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self.products = ProductRepository(store)
        self.orders = OrderRepository(store)
        self.profiles = ProfileRepository(store)
