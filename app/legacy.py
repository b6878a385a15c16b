"""
Adapters from historical record shapes to the canonical schema.

Older builds of the front-end wrote products and orders with snake_case keys
(``image_url``, ``seller_id``, ``upi_qr_url``), title-cased statuses
(``Processing``, ``Delivered``) and a separate pair of role-specific summary
collections (``buyerOrders`` / ``sellerOrders``). Everything is converted
here, at the boundary, so the rest of the code only sees canonical models.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from app.models import (
    MigrationReport,
    Order,
    OrderStatus,
    OrderSummary,
    Product,
    Role,
    UserProfile,
)
from app.store import RecordStore

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "products"
ORDERS_KEY = "orders"
LEGACY_SUMMARY_KEYS = {Role.BUYER: "buyerOrders", Role.SELLER: "sellerOrders"}

_STATUS_MAP = {
    "pending": OrderStatus.PENDING,
    "processing": OrderStatus.PENDING,
    "confirmed": OrderStatus.CONFIRMED,
    "delivered": OrderStatus.CONFIRMED,
}

_QR_KEYS = ("upiQr", "upi_qr", "upiQrUrl", "upi_qr_url")


def normalize_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    status = _STATUS_MAP.get(str(value).strip().lower())
    if status is None:
        raise ValueError(f"Order status {value!r} has no canonical equivalent")
    return status


def upgrade_product(raw: dict) -> Product:
    data = dict(raw)
    qr = next((data[k] for k in _QR_KEYS if data.get(k)), None)
    for k in _QR_KEYS:
        data.pop(k, None)
    if qr:
        data["upiQr"] = qr
    return Product.model_validate(data)


def upgrade_order(raw: dict) -> Order:
    data = dict(raw)
    if "status" in data:
        data["status"] = normalize_status(data["status"])
    for k in ("paymentMethod", "payment_method"):
        if isinstance(data.get(k), str):
            data[k] = data[k].lower()
    details = data.pop("productDetails", None) or data.pop("product_details", None)
    if isinstance(details, dict):
        data["productDetails"] = upgrade_product(details)
    return Order.model_validate(data)


def _partition(store: RecordStore, key: str, upgrade) -> tuple[list, list]:
    """Split a collection into upgraded records and the raw rows that could not be upgraded."""
    records, unusable = [], []
    for raw in store.read_collection(key):
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object entry in %r", key)
            unusable.append(raw)
            continue
        try:
            records.append(upgrade(raw))
        except (ValidationError, ValueError) as exc:
            logger.warning("Skipping unreadable entry %r in %r: %s", raw.get("id"), key, exc)
            unusable.append(raw)
    return records, unusable


def load_records(store: RecordStore, key: str, upgrade) -> list:
    """Read a collection, upgrading each row and skipping the unusable ones."""
    return _partition(store, key, upgrade)[0]


# ── Role-specific summaries ──────────────────────────────────────────────────

def summarize_order(order: Order, role: Role, buyer: Optional[UserProfile] = None) -> OrderSummary:
    """Project an order into the row a buyer or seller sees in their order list."""
    summary = OrderSummary(
        id=order.id,
        product_name=order.product_details.name,
        price=order.total_amount,
        order_date=order.order_date.isoformat(),
        status=order.status.value,
        image_url=order.product_details.image_url,
    )
    if role == Role.BUYER:
        summary.seller_id = order.seller_id
    else:
        summary.buyer_name = buyer.name if buyer else None
        summary.buyer_address = order.address
    return summary


def read_legacy_summaries(store: RecordStore, role: Role) -> list[OrderSummary]:
    return load_records(store, LEGACY_SUMMARY_KEYS[role], OrderSummary.model_validate)


# ── Migration ────────────────────────────────────────────────────────────────

def unmigrated_key(key: str) -> str:
    return f"{key}_unmigrated"


def _migrate_collection(store: RecordStore, key: str, upgrade) -> tuple[int, int]:
    records, unusable = _partition(store, key, upgrade)
    store.write(key, [r.to_record() for r in records])
    if unusable:
        aside = store.read_collection(unmigrated_key(key))
        store.write(unmigrated_key(key), aside + unusable)
    return len(records), len(unusable)


def migrate_store(store: RecordStore) -> MigrationReport:
    """
    Rewrite the product and order collections in canonical shape.

    Rows with no canonical form (a ``Cancelled`` order, a fractional price)
    are moved verbatim to ``<key>_unmigrated`` rather than discarded.
    """
    products_kept, products_aside = _migrate_collection(store, PRODUCTS_KEY, upgrade_product)
    orders_kept, orders_aside = _migrate_collection(store, ORDERS_KEY, upgrade_order)

    report = MigrationReport(
        products_kept=products_kept,
        products_set_aside=products_aside,
        orders_kept=orders_kept,
        orders_set_aside=orders_aside,
    )
    logger.info("Migrated store: %s", report.model_dump())
    return report
