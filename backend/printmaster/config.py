import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./printmaster.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

# Pricing
URGENT_FEE = float(os.getenv("URGENT_FEE", "50"))
BW_RATE = float(os.getenv("BW_RATE", "2"))
COLOR_RATE = float(os.getenv("COLOR_RATE", "10"))
CUSTOM_PRINT_PAGE_COST = float(os.getenv("CUSTOM_PRINT_PAGE_COST", "0.5"))

# Simulated placement latency for self-service checkout
CHECKOUT_DELAY_SECONDS = float(os.getenv("CHECKOUT_DELAY_SECONDS", "0"))

SHOP_TIMEZONE = os.getenv("SHOP_TIMEZONE", "Asia/Kolkata")

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

ORDER_WEBHOOK_URL = os.getenv("ORDER_WEBHOOK_URL")

STORE_NAME = os.getenv("STORE_NAME", "Print Bazar")
WHATSAPP_COUNTRY_CODE = os.getenv("WHATSAPP_COUNTRY_CODE", "91")
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploads")

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@printmaster.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

# Server
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
