# app/api/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.errors import register_exception_handlers
from app.api.routers import (
    auth,
    billing,
    cart,
    chat,
    health,
    notifications,
    orders,
    products,
    store,
    webhooks,
)
from app.data.database import Base, SessionLocal, engine
from app.services.identity_provider import LocalIdentityProvider, SupabaseIdentityProvider
from app.services.lock_service import LockService
from app.services.payment_gateway import PaymentGateway
from app.utils.settings import APP_VERSION, IDENTITY_PROVIDER
from app.utils.logging import get_logger

# import wszystkich modeli, zeby byly w Base.metadata przed create_all
from app.data import models  # noqa: F401

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
    yield


def build_identity_provider(name: str = IDENTITY_PROVIDER):
    if name == "supabase":
        return SupabaseIdentityProvider()
    if name == "local":
        return LocalIdentityProvider(SessionLocal)
    raise ValueError(f"Unknown IDENTITY_PROVIDER: {name}")


def create_app(
    payment_gateway=None,
    lock_service=None,
    identity_provider=None,
    use_lifespan: bool = True,
) -> FastAPI:
    app = FastAPI(
        title="Car Shop API",
        version=APP_VERSION,
        lifespan=lifespan if use_lifespan else None,
    )

    # klienci zewnetrzni budowani jawnie tutaj, endpointy dostaja je przez Depends
    app.state.payment_gateway = payment_gateway or PaymentGateway()
    app.state.lock_service = lock_service or LockService()
    app.state.identity_provider = identity_provider or build_identity_provider()

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(products.router)
    app.include_router(cart.router)
    app.include_router(billing.router)
    app.include_router(orders.router)
    app.include_router(chat.router)
    app.include_router(notifications.router)
    app.include_router(store.router)
    app.include_router(webhooks.router)

    return app
