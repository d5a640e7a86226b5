import os
from dotenv import load_dotenv

load_dotenv()


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./storefront.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

PRODUCT_PER_PAGE = int(os.getenv("PRODUCT_PER_PAGE", "8"))

# Share of gross revenue booked as marketing spend in the revenue breakdown.
MARKETING_COST_RATIO = float(os.getenv("MARKETING_COST_RATIO", "0.30"))
