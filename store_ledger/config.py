import os
from pathlib import Path

from .constants import DATA_DIR, DB_FILE_NAME

BASE_DIR = Path(__file__).resolve().parent

# STORE_LEDGER_DATA_DIR moves the ledger outside the install tree
DATA_PATH = Path(os.environ.get("STORE_LEDGER_DATA_DIR") or (BASE_DIR / DATA_DIR))
DB_PATH = DATA_PATH / DB_FILE_NAME
