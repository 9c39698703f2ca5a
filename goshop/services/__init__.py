from .errors import ShopError
from .pricing import PricingSettings, Totals, quote
from .cart_store import CartStore
from .session import Anonymous, Authenticated, SessionResolver, Resolution
from .checkout import CheckoutOrchestrator, CheckoutPolicy, CheckoutSelections
from .accounts import AccountService

__all__ = [
    'ShopError',
    'PricingSettings',
    'Totals',
    'quote',
    'CartStore',
    'Anonymous',
    'Authenticated',
    'SessionResolver',
    'Resolution',
    'CheckoutOrchestrator',
    'CheckoutPolicy',
    'CheckoutSelections',
    'AccountService',
]
