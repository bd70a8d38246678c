import os
import sys

from dotenv import load_dotenv

from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test runs to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)

# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    _runtime_env_str = os.environ.get("RUNTIME_ENVIRONMENT")
    if not _runtime_env_str:
        raise ValueError("RUNTIME_ENVIRONMENT environment variable is not set")
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(_runtime_env_str)
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"Current value: {os.environ.get('RUNTIME_ENVIRONMENT', '(not set)')}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)

# Remote base credentials (required everywhere except TEST)
AIRTABLE_API_KEY = os.environ.get("AIRTABLE_API_KEY", "")
AIRTABLE_BASE_ID = os.environ.get("AIRTABLE_BASE_ID", "")
AIRTABLE_API_URL = os.environ.get("AIRTABLE_API_URL", "https://api.airtable.com/v0").rstrip("/")

if RUNTIME_ENVIRONMENT != RuntimeEnvironment.TEST:
    _missing = [name for name, value in (("AIRTABLE_API_KEY", AIRTABLE_API_KEY),
                                         ("AIRTABLE_BASE_ID", AIRTABLE_BASE_ID)) if not value]
    if _missing:
        print(f"\n ERROR: Missing remote base configuration\n", file=sys.stderr)
        print(f"Reason: {', '.join(_missing)} not set", file=sys.stderr)
        print(f"Expected: personal access token and base id of the storefront base", file=sys.stderr)
        print(f"Example: AIRTABLE_BASE_ID=appXXXXXXXXXXXXXX\n", file=sys.stderr)
        sys.exit(1)

# Table names
CUSTOMERS_TABLE = os.environ.get("CUSTOMERS_TABLE", "Table 1")
EMPLOYEES_TABLE = os.environ.get("EMPLOYEES_TABLE", "работники")
PRODUCTS_TABLE = os.environ.get("PRODUCTS_TABLE", "catalog")
ORDERS_TABLE = os.environ.get("ORDERS_TABLE", "заказ")
REVIEWS_TABLE = os.environ.get("REVIEWS_TABLE", "отзывы")
NOTIFICATIONS_TABLE = os.environ.get("NOTIFICATIONS_TABLE", "уведомления")
BANNERS_TABLE = os.environ.get("BANNERS_TABLE", "плашки")
FEEDBACK_TABLE = os.environ.get("FEEDBACK_TABLE", "бета центр")

# HTTP client
HTTP_TIMEOUT_SECONDS = float(os.environ.get("HTTP_TIMEOUT_SECONDS", "15"))
AIRTABLE_READ_RETRIES = int(os.environ.get("AIRTABLE_READ_RETRIES", "2"))
AIRTABLE_RETRY_BACKOFF_SECONDS = float(os.environ.get("AIRTABLE_RETRY_BACKOFF_SECONDS", "0.5"))
AIRTABLE_BATCH_LIMIT = 10  # Hard limit of the records API per write request

# Cart & checkout
try:
    MAX_CART_WEIGHT_KG = float(os.environ.get("MAX_CART_WEIGHT_KG", "10"))
    DELIVERY_FEE = float(os.environ.get("DELIVERY_FEE", "99"))
    if MAX_CART_WEIGHT_KG <= 0:
        raise ValueError(f"MAX_CART_WEIGHT_KG must be positive (got: {MAX_CART_WEIGHT_KG})")
    if DELIVERY_FEE < 0:
        raise ValueError(f"DELIVERY_FEE must not be negative (got: {DELIVERY_FEE})")
except ValueError as e:
    print(f"\n ERROR: Invalid cart configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Expected: numbers (e.g., MAX_CART_WEIGHT_KG=10, DELIVERY_FEE=99)\n", file=sys.stderr)
    sys.exit(1)

CART_SAVE_DEBOUNCE_SECONDS = float(os.environ.get("CART_SAVE_DEBOUNCE_SECONDS", "1"))
ADJUSTMENT_NOTICE_SECONDS = float(os.environ.get("ADJUSTMENT_NOTICE_SECONDS", "4"))
TOAST_SECONDS = float(os.environ.get("TOAST_SECONDS", "3.5"))

# Orders
DEFAULT_DELIVERY_MINUTES = int(os.environ.get("DEFAULT_DELIVERY_MINUTES", "15"))
ORDER_DELAY_MINUTES = int(os.environ.get("ORDER_DELAY_MINUTES", "15"))
THANK_YOU_TTL_SECONDS = int(os.environ.get("THANK_YOU_TTL_SECONDS", "300"))
REVIEW_SETTLE_SECONDS = float(os.environ.get("REVIEW_SETTLE_SECONDS", "0.5"))

# Polling intervals
ORDER_POLL_INTERVAL_SECONDS = float(os.environ.get("ORDER_POLL_INTERVAL_SECONDS", "4"))
NOTIFICATION_POLL_INTERVAL_SECONDS = float(os.environ.get("NOTIFICATION_POLL_INTERVAL_SECONDS", "15"))
EMPLOYEE_POLL_INTERVAL_SECONDS = float(os.environ.get("EMPLOYEE_POLL_INTERVAL_SECONDS", "5"))
DELIVERING_POLL_INTERVAL_SECONDS = float(os.environ.get("DELIVERING_POLL_INTERVAL_SECONDS", "8"))
PRODUCT_REFRESH_INTERVAL_SECONDS = float(os.environ.get("PRODUCT_REFRESH_INTERVAL_SECONDS", "30"))

# Auth
EMPLOYEE_LOGIN_TOKEN = os.environ.get("EMPLOYEE_LOGIN_TOKEN", "work")
STOREFRONT_LOGIN = os.environ.get("STOREFRONT_LOGIN", "")
STOREFRONT_PASSWORD = os.environ.get("STOREFRONT_PASSWORD", "")

# Local persisted state (auth session, favorites, dismissed prompts)
LOCAL_STORE_PATH = os.environ.get("LOCAL_STORE_PATH", "./data/local_state.json")

LANGUAGE = os.environ.get("LANGUAGE", "ru")

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask sensitive data in logs

# Log Retention: Dev keeps a month for debugging, Prod keeps 5 days
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "30"))
else:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "5"))
