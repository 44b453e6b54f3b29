import os
import logging
from dotenv import load_dotenv

load_dotenv()

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# --- Supabase Configuration ---
SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

# --- JWT Configuration (Supabase Auth access tokens) ---
JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "")
if not JWT_SECRET:
    raise ValueError("SUPABASE_JWT_SECRET must be set in environment variables")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

# --- HTTP ---
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# --- Edge Functions ---
ADMIN_CERTIFICATION_FUNCTION = os.getenv(
    "ADMIN_CERTIFICATION_FUNCTION", "handle-admin-certification-action"
)

# --- App ---
APP_NAME = os.getenv("APP_NAME", "MW Learning Center")
