# pizza_api/utils/settings.py
import os
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "")
DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.getcwd(), ".data"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
TOKEN_TTL_SECONDS = int(os.getenv("TOKEN_TTL_SECONDS", 60 * 60))
PAYMENT_GATEWAY_URL = os.getenv("PAYMENT_GATEWAY_URL")
PAYMENT_TIMEOUT = int(os.getenv("PAYMENT_TIMEOUT", 5))
CURRENCY = os.getenv("CURRENCY", "usd")

#named environments, staging is the fallback
ENVIRONMENTS = {
    "staging": {
        "http_port": 3000,
        "https_port": 3001,
        "hashing_secret": "aSecretHash",
        "max_cart_items": 3,
    },
    "production": {
        "http_port": 5000,
        "https_port": 5001,
        "hashing_secret": "alsoASecretHash",
        "max_cart_items": 3,
    },
}


class Settings(BaseModel):
    """Explicit configuration handed to services and handlers at construction."""

    model_config = ConfigDict(frozen=True)

    env_name: str = "staging"
    http_port: int = 3000
    https_port: int = 3001
    hashing_secret: str = "aSecretHash"
    max_cart_items: int = 3
    token_ttl_seconds: int = TOKEN_TTL_SECONDS
    data_dir: str = DATA_DIR
    log_level: str = LOG_LEVEL
    log_file: str | None = None
    ssl_keyfile: str | None = None
    ssl_certfile: str | None = None
    payment_gateway_url: str | None = None
    payment_timeout: int = PAYMENT_TIMEOUT
    currency: str = CURRENCY


def load_settings(env_name: str | None = None) -> Settings:
    name = (env_name if env_name is not None else APP_ENV).strip().lower()
    if name not in ENVIRONMENTS:
        name = "staging"
    env = ENVIRONMENTS[name]

    return Settings(
        env_name=name,
        http_port=int(os.getenv("HTTP_PORT", env["http_port"])),
        https_port=int(os.getenv("HTTPS_PORT", env["https_port"])),
        hashing_secret=os.getenv("HASHING_SECRET", env["hashing_secret"]),
        max_cart_items=int(os.getenv("MAX_CART_ITEMS", env["max_cart_items"])),
        token_ttl_seconds=TOKEN_TTL_SECONDS,
        data_dir=DATA_DIR,
        log_level=LOG_LEVEL,
        log_file=LOG_FILE,
        ssl_keyfile=os.getenv("SSL_KEYFILE"),
        ssl_certfile=os.getenv("SSL_CERTFILE"),
        payment_gateway_url=PAYMENT_GATEWAY_URL,
        payment_timeout=PAYMENT_TIMEOUT,
        currency=CURRENCY,
    )
