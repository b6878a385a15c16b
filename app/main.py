import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response

from app import config
from app.catalog import browse, filter_by_name, find_product
from app.checkout import CheckoutError, ProductNotFoundError, place_order
from app.legacy import migrate_store, read_legacy_summaries, summarize_order
from app.models import CheckoutRequest, ProductCreate, Role, SignInRequest, UserProfile
from app.repositories import Repositories
from app.session import SessionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=config.LOG_LEVEL)
    repos = Repositories(config.build_store())
    # Seed an empty store so the service is immediately usable
    if config.SEED_ON_STARTUP and not repos.store.keys():
        from scripts.seed_data import seed
        seed(repos)
        logger.info("Seeded empty store with demo data")
    app.state.repos = repos
    yield


app = FastAPI(
    title="MusicMate Marketplace Service",
    version="1.0.0",
    description="Products, orders and profiles for the MusicMate instrument marketplace",
    lifespan=lifespan,
)


def get_repos(request: Request) -> Repositories:
    return request.app.state.repos


def get_session(repos: Repositories = Depends(get_repos)) -> SessionStore:
    return SessionStore(repos.store)


# ── Products ─────────────────────────────────────────────────────────────────

@app.get("/api/v1/products", summary="Browse products or list a seller's products")
def list_products(
    q: Optional[str] = Query(default=None, description="Case-insensitive name filter"),
    seller_id: Optional[str] = Query(default=None),
    repos: Repositories = Depends(get_repos),
):
    if seller_id is not None:
        products = filter_by_name(repos.products.get_seller_products(seller_id), q)
    else:
        products = browse(repos.products.get_products(), q)
    return {"products": [p.to_record() for p in products]}


@app.get("/api/v1/products/{product_id}", summary="Get product details")
def get_product(product_id: str, repos: Repositories = Depends(get_repos)):
    product = find_product(repos.products.get_products(), product_id)
    if not product:
        raise HTTPException(404, "Product Not Found")
    return product.to_record()


@app.post("/api/v1/products", status_code=201, summary="Add a product listing")
def add_product(product: ProductCreate, repos: Repositories = Depends(get_repos)):
    return repos.products.add_product(product).to_record()


@app.delete("/api/v1/products/{product_id}", status_code=204, summary="Remove a product listing")
def remove_product(product_id: str, repos: Repositories = Depends(get_repos)):
    repos.products.remove_product(product_id)
    return Response(status_code=204)


# ── Orders ───────────────────────────────────────────────────────────────────

@app.get("/api/v1/orders", summary="List orders, optionally for one buyer or seller")
def list_orders(
    buyer_id: Optional[str] = Query(default=None),
    seller_id: Optional[str] = Query(default=None),
    repos: Repositories = Depends(get_repos),
):
    if buyer_id is not None:
        orders = repos.orders.get_buyer_orders(buyer_id)
    else:
        orders = repos.orders.get_orders()
    if seller_id is not None:
        orders = [o for o in orders if o.seller_id == seller_id]
    return {"orders": [o.to_record() for o in orders]}


@app.get("/api/v1/orders/summaries", summary="Order list rows for a buyer or seller")
def order_summaries(
    role: Role = Query(...),
    user_id: str = Query(...),
    include_legacy: bool = Query(default=False, description="Append rows from the old summary keys"),
    repos: Repositories = Depends(get_repos),
):
    if role == Role.BUYER:
        summaries = [summarize_order(o, role) for o in repos.orders.get_buyer_orders(user_id)]
    else:
        summaries = [
            summarize_order(o, role, repos.profiles.get_user_profile(o.buyer_id))
            for o in repos.orders.get_seller_orders(user_id)
        ]
    if include_legacy:
        summaries.extend(read_legacy_summaries(repos.store, role))
    return {"orders": [s.to_record() for s in summaries]}


@app.get("/api/v1/orders/{order_id}", summary="Get order details")
def get_order(order_id: str, repos: Repositories = Depends(get_repos)):
    order = repos.orders.get_order(order_id)
    if not order:
        raise HTTPException(404, f"Order '{order_id}' not found")
    return order.to_record()


@app.post("/api/v1/checkout", status_code=201, summary="Place an order for one product")
def checkout(body: CheckoutRequest, repos: Repositories = Depends(get_repos)):
    try:
        order = place_order(repos, body.product_id, body.buyer_id, body.address, body.payment_method)
    except ProductNotFoundError as exc:
        raise HTTPException(404, str(exc))
    except CheckoutError as exc:
        raise HTTPException(400, str(exc))
    return order.to_record()


# ── Profiles & session ───────────────────────────────────────────────────────

@app.get("/api/v1/profiles/{user_id}", summary="Get a user profile")
def get_profile(user_id: str, repos: Repositories = Depends(get_repos)):
    profile = repos.profiles.get_user_profile(user_id)
    if not profile:
        raise HTTPException(404, f"Profile '{user_id}' not found")
    return profile.to_record()


@app.put("/api/v1/profiles/{user_id}", summary="Create or overwrite a user profile")
def save_profile(user_id: str, profile: UserProfile, repos: Repositories = Depends(get_repos)):
    if profile.id != user_id:
        raise HTTPException(400, "Profile id does not match the URL")
    repos.profiles.save_user_profile(profile)
    return profile.to_record()


@app.post("/api/v1/session", summary="Sign in as an existing profile")
def sign_in(
    body: SignInRequest,
    repos: Repositories = Depends(get_repos),
    session: SessionStore = Depends(get_session),
):
    profile = repos.profiles.get_user_profile(body.user_id)
    if not profile:
        raise HTTPException(404, f"Profile '{body.user_id}' not found")
    return session.sign_in(profile).to_record()


@app.get("/api/v1/session", summary="Current session")
def current_session(session: SessionStore = Depends(get_session)):
    current = session.current()
    if not current:
        raise HTTPException(404, "Not signed in")
    return current.to_record()


@app.delete("/api/v1/session", status_code=204, summary="Sign out")
def sign_out(session: SessionStore = Depends(get_session)):
    session.sign_out()
    return Response(status_code=204)


# ── Admin ─────────────────────────────────────────────────────────────────────

@app.post("/api/v1/admin/seed", summary="Re-seed demo data")
def reseed(repos: Repositories = Depends(get_repos)):
    from scripts.seed_data import seed
    repos.store.clear()
    seed(repos)
    return {
        "status": "seeded",
        "products": len(repos.products.get_products()),
        "orders": len(repos.orders.get_orders()),
    }


@app.post("/api/v1/admin/migrate", summary="Rewrite legacy records in canonical shape")
def migrate(repos: Repositories = Depends(get_repos)):
    return migrate_store(repos.store).model_dump()
