# constants.py
APP_NAME = "Store Ledger"

DATA_DIR = "data"
DB_FILE_NAME = "ledger.db"

TABLE_SCHEMA_VERSION = "schema_version"
TABLE_KV_STORE = "kv_store"
SCHEMA_VERSION = "1.0.0"

# Persistence slots (one full snapshot per slot)
CATALOG_KEY = "catalog"
ENTRIES_KEY = "entries"
