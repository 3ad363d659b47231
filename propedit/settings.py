# propedit/settings.py
from pathlib import Path
import os

BASE_DIR = Path(__file__).resolve().parent.parent
STATIC_DIR = BASE_DIR / "static"

MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", 50 * 1024 * 1024))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", 8000))

# The metadata part every OOXML package carries
CORE_PROPERTIES_PATH = "docProps/core.xml"

# Enforced by the upload glue only; the core relies on the entry being present
ALLOWED_EXTENSIONS = {".docx", ".pptx", ".xlsx"}
