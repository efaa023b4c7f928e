# core/config.py
import os

from dotenv import load_dotenv

# Load .env
load_dotenv()

API_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_DIR = os.path.join(API_DIR, "config")

# ---- ENV VALUES ----
VERSE_BOOKS_FILE = os.getenv(
    "VERSE_BOOKS_FILE", os.path.join(CONFIG_DIR, "bible_books.yml")
)
VERSE_SETTINGS_FILE = os.getenv(
    "VERSE_SETTINGS_FILE", os.path.join(CONFIG_DIR, "verse_formatter.yml")
)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
HOST = os.getenv("VERSE_API_HOST", "127.0.0.1")
PORT = int(os.getenv("VERSE_API_PORT", "5055"))
