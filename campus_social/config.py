# campus_social/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _csv(name: str, default: str = "") -> list:
    return [s.strip() for s in (os.getenv(name, default) or "").split(",") if s.strip()]


def _flag(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


# Mongo
MONGO_URL = os.getenv("MONGODB_URL")
MONGO_DB_NAME = os.getenv("MONGODB_DB", "campus_social")
# Needs a replica set; standalone servers reject transactions
USE_TRANSACTIONS = _flag("MONGODB_TRANSACTIONS")

# JWT (JWT_SECRET_KEY preferred, JWT_SECRET as fallback)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or os.getenv("JWT_SECRET") or ""
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", "7"))

# HTTP
CORS_ORIGINS = _csv("CORS_ORIGINS", "*")

# Registration / login is limited to these domains when set
ALLOWED_EMAIL_DOMAINS = [d.lower() for d in _csv("ALLOWED_EMAIL_DOMAINS")]

# Feeds
FEED_FOLLOWING_CAP = int(os.getenv("FEED_FOLLOWING_CAP", "1000"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))

# Recent searches kept per user
SEARCH_HISTORY_SIZE = int(os.getenv("SEARCH_HISTORY_SIZE", "10"))

# Stories live for 24 hours
STORY_TTL_HOURS = 24

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Lower in tests; 12 matches the cost of existing hashes
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
