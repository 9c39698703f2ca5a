from .auth import auth_bp
from .products import products_bp
from .cart import cart_bp
from .checkout import checkout_bp
from .account import account_bp


__all__ = [
    'auth_bp',
    'products_bp',
    'cart_bp',
    'checkout_bp',
    'account_bp',
]
