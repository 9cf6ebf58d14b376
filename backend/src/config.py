"""Configuration settings for the YallaR7la backend."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from project root
project_root = Path(__file__).resolve().parent.parent.parent
env_path = project_root / ".env"
load_dotenv(env_path)
load_dotenv()  # Fallback: try loading from current working directory


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Secret key for signing bearer tokens
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
ACCESS_TOKEN_TTL_HOURS = int(os.getenv("ACCESS_TOKEN_TTL_HOURS", "24"))

# Default to SQLite for development (app.db in project root)
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{project_root / 'app.db'}")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma-separated list of allowed CORS origins
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]

# Booking: when true, unbooking cannot raise available slots above the
# capacity the destination was created with.
UNBOOK_CAP_AT_CAPACITY = _env_bool("UNBOOK_CAP_AT_CAPACITY", "false")

# Feedback rating bounds (inclusive)
FEEDBACK_MIN_RATING = int(os.getenv("FEEDBACK_MIN_RATING", "1"))
FEEDBACK_MAX_RATING = int(os.getenv("FEEDBACK_MAX_RATING", "5"))

# Roles
ROLE_USER = "User"
ROLE_BUSINESS_OWNER = "BusinessOwner"
ROLE_ADMIN = "Admin"
