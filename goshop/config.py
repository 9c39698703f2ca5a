import os

class BaseConfig:
    JSON_SORT_KEYS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    SIGNIN_LIMIT_PER_IP = os.getenv("SIGNIN_LIMIT_PER_IP", "10 per 30 minutes")
    SIGNUP_LIMIT_PER_IP = os.getenv("SIGNUP_LIMIT_PER_IP", "5 per 15 minutes")
    CHECKOUT_LIMIT_PER_IP = os.getenv("CHECKOUT_LIMIT_PER_IP", "20 per hour")
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret")
    SESSION_LIFETIME_DAYS = int(os.getenv("SESSION_LIFETIME_DAYS", 7))
    SESSION_COOKIE = os.getenv("SESSION_COOKIE", "SESSION")
    CART_COOKIE = os.getenv("CART_COOKIE", "CART_ID")
    COOKIE_SECURE = os.getenv("COOKIE_SECURE", "0") == "1"

    # Pricing, in minor currency units
    DELIVERY_FEE_CENTS = int(os.getenv("DELIVERY_FEE_CENTS", 1000))
    FREE_DELIVERY_THRESHOLD_CENTS = int(os.getenv("FREE_DELIVERY_THRESHOLD_CENTS", 10000))
    TAX_RATE = os.getenv("TAX_RATE", "0.125")
    GIFT_WRAP_FEE_CENTS = int(os.getenv("GIFT_WRAP_FEE_CENTS", 2000))
    SAME_DAY_FEE_CENTS = int(os.getenv("SAME_DAY_FEE_CENTS", 1500))
    NEXT_DAY_FEE_CENTS = int(os.getenv("NEXT_DAY_FEE_CENTS", 800))
    LATER_FEE_CENTS = int(os.getenv("LATER_FEE_CENTS", 500))
    CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₵")

    # Checkout
    GUEST_PAYMENT_KIND = os.getenv("GUEST_PAYMENT_KIND", "card")
    SAME_DAY_CUTOFF_HOUR = int(os.getenv("SAME_DAY_CUTOFF_HOUR", 15))
    DELIVERY_WINDOW_DAYS = int(os.getenv("DELIVERY_WINDOW_DAYS", 7))
    # eager tasks would walk an order to delivered inside the checkout request
    ORDER_PROGRESS_ENABLED = os.getenv("ORDER_PROGRESS_ENABLED", "0") == "1"

    PORT = int(os.getenv("PORT", 8000))

    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "goshop-backend")
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces")

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")

class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    JWT_SECRET = "test-jwt-secret"
    ORDER_PROGRESS_ENABLED = False

class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    COOKIE_SECURE = True

    @staticmethod
    def validate():
        missing = []
        if not os.getenv("SECRET_KEY"):
            missing.append("SECRET_KEY")
        if not os.getenv("JWT_SECRET"):
            missing.append("JWT_SECRET")
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )

def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
