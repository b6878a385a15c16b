import logging
from datetime import datetime, timezone
from typing import Optional

from app.catalog import find_product
from app.models import Order, OrderStatus, PaymentMethod
from app.repositories import Repositories, new_id

logger = logging.getLogger(__name__)


class CheckoutError(ValueError):
    pass


class ProductNotFoundError(CheckoutError):
    pass


# UPI payments are settled outside the system, so those orders wait for the seller
_INITIAL_STATUS = {
    PaymentMethod.COD: OrderStatus.CONFIRMED,
    PaymentMethod.UPI: OrderStatus.PENDING,
}


def place_order(
    repos: Repositories,
    product_id: str,
    buyer_id: str,
    address: str,
    payment_method: PaymentMethod = PaymentMethod.COD,
    now: Optional[datetime] = None,
) -> Order:
    product = find_product(repos.products.get_products(), product_id)
    if product is None:
        raise ProductNotFoundError(f"Product '{product_id}' not found")
    if not address or not address.strip():
        raise CheckoutError("Address required")

    snapshot = product.model_copy(deep=True)
    order = Order(
        id=new_id(),
        product_id=product.id,
        buyer_id=buyer_id,
        seller_id=product.seller_id,
        product_details=snapshot,
        address=address.strip(),
        payment_method=payment_method,
        status=_INITIAL_STATUS[payment_method],
        order_date=now or datetime.now(timezone.utc),
        total_amount=snapshot.price,
    )
    repos.orders.save_order(order)
    logger.info("Order %s placed by %s for product %s", order.id, buyer_id, product.id)
    return order
