from __future__ import annotations

from supabase import create_client, Client

from .. import config


def get_supabase_client() -> Client:
    missing = config.missing_supabase_env()
    if missing:
        raise EnvironmentError(
            f"Supabase credentials not configured (missing: {', '.join(missing)}). "
            "Export them or put them in .env; .env.example lists the keys."
        )
    return create_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY)
