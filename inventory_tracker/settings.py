import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
# Relative values are resolved against the project root.
STORAGE_DIR = BASE_DIR / os.getenv("STORAGE_DIR", "data")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Ledger Persistence ---
LEDGER_STORAGE_KEY = os.getenv("LEDGER_STORAGE_KEY", "inventory")
LEDGER_SCHEMA_VERSION = 1

# --- Reports ---
REPORT_FORMAT = os.getenv("REPORT_FORMAT", "xlsx").lower()
REPORT_FORMATS = ["xlsx", "csv"]
REPORT_FILENAME_PREFIX = "inventory-report-"
REPORT_SHEET_NAME = "Inventory Report"

# Export column order, exactly as it appears in the generated file.
REPORT_COLUMNS = [
    "Name",
    "SKU",
    "Category",
    "Quantity",
    "Price",
    "Total Value",
    "Reorder Point",
    "Last Updated",
]

# --- Bulk Import ---
# Header names expected in the first row of an import file (case-sensitive).
IMPORT_COLUMNS = [
    "name",
    "sku",
    "quantity",
    "price",
    "category",
    "reorderPoint",
]
