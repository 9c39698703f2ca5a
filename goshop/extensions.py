from dataclasses import dataclass

from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os

from goshop.services.accounts import AccountService
from goshop.services.checkout import CheckoutOrchestrator, CheckoutPolicy
from goshop.services.pricing import PricingSettings
from goshop.services.session import SessionResolver
from goshop.store import MemoryStore

# Global limiter instance used across the app
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("RATELIMIT_STORAGE_URL", "memory://"),
    strategy="fixed-window",
    default_limits=["200 per hour"],
)


@dataclass
class ShopServices:
    store: MemoryStore
    settings: PricingSettings
    sessions: SessionResolver
    checkout: CheckoutOrchestrator
    accounts: AccountService


def init_services(app, store=None) -> ShopServices:
    store = store if store is not None else MemoryStore()
    settings = PricingSettings.from_config(app.config)
    services = ShopServices(
        store=store,
        settings=settings,
        sessions=SessionResolver(store),
        checkout=CheckoutOrchestrator(
            store,
            settings=settings,
            policy=CheckoutPolicy.from_config(app.config),
        ),
        accounts=AccountService(store),
    )
    app.extensions["goshop"] = services
    return services


def shop() -> ShopServices:
    return current_app.extensions["goshop"]
