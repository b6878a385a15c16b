"""
Deterministic demo data.

Produces:
  - 3 seller profiles (owners of the demo catalog listings: 101 / 102 / 103)
  - 2 buyer profiles
  - 4 seller-added products
  - 6 orders placed across Jan 2026, a mix of COD and UPI
"""

import random
from datetime import datetime, timedelta, timezone

from app.checkout import place_order
from app.models import PaymentMethod, ProductCreate, Role, UserProfile
from app.repositories import Repositories

SEED = 42
START = datetime(2026, 1, 1, tzinfo=timezone.utc)
END   = datetime(2026, 1, 31, 23, 59, 59, tzinfo=timezone.utc)

_IMG = "https://images.unsplash.com/photo-{}?w=500&auto=format&fit=crop&q=60"


def _rand_dt(rng: random.Random, lo: datetime = START, hi: datetime = END) -> datetime:
    delta = hi - lo
    secs = rng.randint(0, int(delta.total_seconds()))
    return lo + timedelta(seconds=secs)


def seed(repos: Repositories) -> None:
    rng = random.Random(SEED)

    # ── profiles ─────────────────────────────────────────────────────────────
    profiles = [
        UserProfile(id="101", name="Rhythm House", email="sales@rhythmhouse.in",
                    mobile="9800000101", role=Role.SELLER),
        UserProfile(id="102", name="Keys & Co", email="hello@keysandco.in",
                    mobile="9800000102", role=Role.SELLER),
        UserProfile(id="103", name="String Theory", email="shop@stringtheory.in",
                    mobile="9800000103", role=Role.SELLER),
        UserProfile(id="b1", name="Asha Menon", email="asha@example.com",
                    mobile="9800000201", address="12 MG Road, Bengaluru", role=Role.BUYER),
        UserProfile(id="b2", name="Rahul Verma", email="rahul@example.com",
                    mobile="9800000202", address="4 Park Street, Kolkata", role=Role.BUYER),
    ]
    for p in profiles:
        repos.profiles.save_user_profile(p)

    # ── seller listings ──────────────────────────────────────────────────────
    listings = [
        ProductCreate(name="Bass Guitar", price=15500, seller_id="101",
                      description="Four-string passive bass, sunburst finish.",
                      image_url=_IMG.format("1525201548942-d8732f6617a0")),
        ProductCreate(name="Cajon", price=3200, seller_id="103",
                      description="Birch cajon with internal snares.",
                      image_url=_IMG.format("1519892300165-cb5542fb47c7")),
        ProductCreate(name="Digital Piano", price=42000, seller_id="102",
                      description="88 weighted keys, three pedals.",
                      image_url=_IMG.format("1520523839897-bd0b52f945a0")),
        ProductCreate(name="Ukulele - Concert", price=4800, seller_id="103",
                      description="Mahogany concert ukulele with gig bag.",
                      image_url=_IMG.format("1511379938547-c1f69419868d")),
    ]
    added = [repos.products.add_product(p) for p in listings]

    # ── orders ───────────────────────────────────────────────────────────────
    catalog_ids = [p.id for p in added] + ["1", "2", "3", "4"]
    buyers = [p for p in profiles if p.role == Role.BUYER]
    # appended in chronological order
    for when in sorted(_rand_dt(rng) for _ in range(6)):
        buyer = rng.choice(buyers)
        place_order(
            repos,
            product_id=rng.choice(catalog_ids),
            buyer_id=buyer.id,
            address=buyer.address,
            payment_method=rng.choice(list(PaymentMethod)),
            now=when,
        )
