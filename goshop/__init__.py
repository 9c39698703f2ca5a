from flask import Flask, request, g
from dotenv import load_dotenv
from goshop.config import get_config_class
from goshop.logging import configure_logging
from goshop.errors import errors_bp
from goshop.cli import register_cli
from goshop.api import register_api_v1
from goshop.extensions import limiter, init_services
from goshop.version import API_PREFIX
from goshop import metrics
from flask_cors import CORS
from flasgger import Swagger
from prometheus_flask_exporter import PrometheusMetrics
import os
import uuid
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from goshop.telemetry import init_tracing


def create_app(config_object=None, store=None):
    """Application factory.

    ``store`` lets callers (tests, the CLI) hand in a prepared ``MemoryStore``;
    a freshly seeded one is created otherwise.
    """
    load_dotenv()
    app = Flask(__name__)

    if config_object is not None:
        app.config.from_object(config_object)
    else:
        app.config.from_object(get_config_class())

    configure_logging(app)
    register_cli(app)

    # Initialize extensions
    limiter.init_app(app)
    app.limiter = limiter

    Swagger(
        app,
        config={
            "headers": [],
            "specs": [
                {
                    "endpoint": "apispec",
                    "route": "/apispec.json",
                    "rule_filter": lambda rule: rule.rule.startswith(
                        f"{API_PREFIX}/"
                    ),
                    "model_filter": lambda tag: True,
                }
            ],
            "swagger_ui": True,
            "specs_route": "/docs/",
        },
        template={
            "tags": [
                {"name": "Catalog", "description": "Products and markets"},
                {"name": "Cart", "description": "Cart lines, coupons and gift wrap"},
                {"name": "Checkout", "description": "Quotes, orders and delivery"},
                {"name": "Account", "description": "Addresses, payment methods, favorites"},
            ]
        },
    )
    prom = PrometheusMetrics(app, path="/metrics")
    if not app.config.get("TESTING") and not os.environ.get("METRICS_APP_INFO_SET"):
        prom.info("app_info", "Application info", version="1.0.0")
        os.environ["METRICS_APP_INFO_SET"] = "1"

    # Configure CORS
    allowed = app.config.get("CORS_ALLOWED_ORIGINS", "*")
    if isinstance(allowed, str):
        allowed = allowed.strip()
        origins = "*" if allowed == "*" else [o.strip() for o in allowed.split(",") if o.strip()]
    else:
        origins = allowed or "*"
    CORS(
        app,
        origins=origins,
        supports_credentials=True,
        expose_headers=["X-Request-ID"],
    )

    app.register_blueprint(errors_bp)
    if app.config.get("TESTING"):
        from goshop.test_support import test_support_bp
        app.register_blueprint(test_support_bp)

    init_services(app, store)
    register_api_v1(app)

    # Celery app and the order progress receiver register themselves on import
    import goshop.celery_app  # noqa: F401
    import goshop.services.order_progress  # noqa: F401

    @app.before_request
    def _set_request_id():
        incoming = request.headers.get("X-Request-ID")
        rid = (incoming or uuid.uuid4().hex)[:100]
        g.request_id = rid
        app.logger.info(f"request start {request.method} {request.path}")

    @app.after_request
    def _add_request_id_header(resp):
        rid = getattr(g, "request_id", None)
        if rid:
            resp.headers["X-Request-ID"] = rid
        return resp

    @app.after_request
    def _set_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        existing = resp.headers.get("Access-Control-Expose-Headers", "")
        for name in ("X-Request-ID", "traceparent"):
            if name not in existing:
                existing = (
                    existing
                    + ("," if existing and not existing.endswith(",") else "")
                    + name
                ).strip(",")
        resp.headers["Access-Control-Expose-Headers"] = existing
        return resp

    @app.after_request
    def _add_trace_header(resp):
        carrier = {}
        TraceContextTextMapPropagator().inject(carrier)
        tp = carrier.get("traceparent")
        if tp:
            resp.headers["traceparent"] = tp
        return resp

    init_tracing(app)
    metrics.init_app(app)

    @app.route("/health")
    def health():
        return {"status": "ok"}, 200

    return app
