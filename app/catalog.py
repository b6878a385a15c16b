from typing import Iterable, Optional

from app.models import Product

_QR = "https://images.unsplash.com/photo-1621155346337-1d19b5b01a73?w=500&auto=format&fit=crop&q=60"

# Static showcase listings shown alongside what sellers have added
DEMO_CATALOG: tuple[Product, ...] = (
    Product(
        id="1",
        name="Acoustic Guitar",
        price=8500,
        description="Solid spruce top, rosewood fretboard.",
        image_url="https://images.unsplash.com/photo-1550291652-6ea9114a47b1?w=500&auto=format&fit=crop&q=60",
        seller_id="101",
        upi_qr=_QR,
    ),
    Product(
        id="2",
        name="Electric Keyboard",
        price=12000,
        description="61 touch-sensitive keys with built-in speakers.",
        image_url="https://images.unsplash.com/photo-1556449895-a33c9dba33dd?w=500&auto=format&fit=crop&q=60",
        seller_id="102",
        upi_qr=_QR,
    ),
    Product(
        id="3",
        name="Professional Drum Set",
        price=25000,
        description="Five-piece kit with cymbals and hardware.",
        image_url="https://images.unsplash.com/photo-1543443258-92b04ad5ec6b?w=500&auto=format&fit=crop&q=60",
        seller_id="101",
        upi_qr=_QR,
    ),
    Product(
        id="4",
        name="Violin - Beginner",
        price=7000,
        description="4/4 student violin with bow and case.",
        image_url="https://images.unsplash.com/photo-1465821185615-20b3c2fbf41b?w=500&auto=format&fit=crop&q=60",
        seller_id="103",
        upi_qr=_QR,
    ),
)


def filter_by_name(products: Iterable[Product], query: Optional[str]) -> list[Product]:
    """Case-insensitive substring match on the product name; blank matches all."""
    products = list(products)
    if not query or not query.strip():
        return products
    needle = query.lower()
    return [p for p in products if needle in p.name.lower()]


def merge_with_demo(local: Iterable[Product]) -> list[Product]:
    merged = list(local)
    seen = {p.id for p in merged}
    merged.extend(p for p in DEMO_CATALOG if p.id not in seen)
    return merged


def browse(local: Iterable[Product], query: Optional[str] = None) -> list[Product]:
    return filter_by_name(merge_with_demo(local), query)


def find_product(local: Iterable[Product], product_id: str) -> Optional[Product]:
    return next((p for p in merge_with_demo(local) if p.id == product_id), None)
