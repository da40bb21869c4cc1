import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "care_billing"),
}

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

PAYMENT_TERMS_DAYS = int(os.getenv("PAYMENT_TERMS_DAYS", "14"))
DEFAULT_SESSION_PAYMENT = os.getenv("DEFAULT_SESSION_PAYMENT", "40")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
