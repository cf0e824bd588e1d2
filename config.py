import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv(BASE_DIR / ".env")


class Config:
    # Generate a real one with `flask gen-secret`
    SECRET_KEY = os.environ.get("FINANCE_SECRET_KEY", "replace_with_a_long_random_string")
    SQLALCHEMY_DATABASE_URI = os.environ.get("FINANCE_DATABASE_URL", "sqlite:///finance.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Toasts: seconds before a toast expires, and "banner" or "modal"
    TOAST_TIMEOUT = float(os.environ.get("FINANCE_TOAST_TIMEOUT", 3))
    TOAST_PRESENTATION = os.environ.get("FINANCE_TOAST_PRESENTATION", "banner")

    LOCALES_DIR = os.environ.get("FINANCE_LOCALES_DIR", str(BASE_DIR / "locales"))
