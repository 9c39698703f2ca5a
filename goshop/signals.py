"""Domain events for observers outside the transactional core.

Receivers never mutate carts directly; order status changes go back through
``CheckoutOrchestrator.advance_status``.
"""
from blinker import Namespace

_signals = Namespace()

# sender: the Cart; kwargs: action, item_id
cart_changed = _signals.signal("cart-changed")
# sender: the Order
order_placed = _signals.signal("order-placed")
# sender: the Order; kwargs: previous
order_status_changed = _signals.signal("order-status-changed")
