import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
# Use Path objects for robust, OS-agnostic path handling.
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Filename Configuration ---
# Backend exports are expected as <prefix>YYYY-MM-DD.csv
PRODUCTS_FILENAME_PREFIX = os.getenv("PRODUCTS_FILENAME_PREFIX", "products_")
TRANSACTIONS_FILENAME_PREFIX = os.getenv(
    "TRANSACTIONS_FILENAME_PREFIX", "transactions_"
)
ACTIVITY_FILENAME_PREFIX = os.getenv("ACTIVITY_FILENAME_PREFIX", "activity_logs_")
REPORT_FILENAME_BASE = os.getenv("REPORT_FILENAME_BASE", "meat-inventory-report")

# --- Output Toggles ---
SAVE_JSON_OUTPUT = os.getenv("SAVE_JSON_OUTPUT", "true").lower() in ("1", "true", "yes")

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")

# --- Hosted Backend (REST) ---
BACKEND_URL = os.getenv("BACKEND_URL")
BACKEND_API_KEY = os.getenv("BACKEND_API_KEY")
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "15"))

# --- Shared Business Logic ---
# Define the explicit order for categories on every screen.
CATEGORY_ORDER = [
    "Beef",
    "Pork",
    "Chicken",
    "Fish",
]

ITEMS_PER_PAGE = 12
PRODUCT_LIST_PER_PAGE = 10
ALERT_WIDGET_LIMIT = 5
ACTIVITY_LOG_LIMIT = 100
RECENT_SALES_WINDOW_DAYS = 30
