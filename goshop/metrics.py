from flask import request
from prometheus_client import Counter, Histogram

from goshop.signals import cart_changed, order_placed

CART_MUTATIONS = Counter(
    "goshop_cart_mutations_total",
    "Cart mutations by action",
    ["action"],
)

ORDERS_PLACED = Counter(
    "goshop_orders_placed_total",
    "Orders placed by checkout flow",
    ["flow"],
)

# Order totals in minor units
ORDER_TOTAL = Histogram(
    "goshop_order_total_cents",
    "Order total in minor currency units",
    buckets=(1000, 2500, 5000, 10000, 25000, 50000, 100000),
)

# Counter for HTTP errors
ERROR_COUNTER = Counter(
    "goshop_http_error_total",
    "Count of HTTP responses with status >= 400",
    ["endpoint", "method", "code"],
)


@cart_changed.connect
def _count_cart_change(cart, action="unknown", **kwargs):
    CART_MUTATIONS.labels(action).inc()


@order_placed.connect
def _count_order(order, **kwargs):
    ORDERS_PLACED.labels("guest" if order.guest else "member").inc()
    ORDER_TOTAL.observe(order.totals["total_cents"])


def init_app(app):
    """Attach metric hooks to the app."""

    @app.after_request
    def track_errors(resp):
        if resp.status_code >= 400:
            endpoint = request.endpoint or "unknown"
            ERROR_COUNTER.labels(endpoint, request.method, resp.status_code).inc()
        return resp
