import os
from dotenv import load_dotenv

load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL")
# The app only reads public tables, so the anon key is enough; the service
# role key is accepted for admin shells.
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_SERVICE_ROLE_KEY")

SEARCH_MIN_QUERY_LENGTH = int(os.getenv("SEARCH_MIN_QUERY_LENGTH", "2"))
SEARCH_FETCH_WORKERS = int(os.getenv("SEARCH_FETCH_WORKERS", "7"))

# Event days are compared in the island's local time.
TIMEZONE = os.getenv("TIMEZONE", "Europe/Zagreb")


def missing_supabase_env() -> list[str]:
    missing = []
    if not SUPABASE_URL:
        missing.append("SUPABASE_URL")
    if not SUPABASE_ANON_KEY:
        missing.append("SUPABASE_ANON_KEY")
    return missing
