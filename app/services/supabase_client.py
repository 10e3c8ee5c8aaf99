import os
from supabase import create_client, Client

supabase: Client | None = None


def _supabase_credentials() -> tuple[str | None, str | None]:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_KEY")
    return url, key


def is_supabase_configured() -> bool:
    url, key = _supabase_credentials()
    return bool(url and key)


def get_supabase() -> Client:
    """
    Lazy Supabase client initializer.

    The service-role key is used because history rows are written on behalf
    of users whose tokens were verified server-side.
    """

    global supabase

    if supabase is not None:
        return supabase

    if not is_supabase_configured():
        raise RuntimeError(
            "Supabase configuration missing.\n"
            "Required env vars:\n"
            "- SUPABASE_URL\n"
            "- SUPABASE_SERVICE_ROLE_KEY or SUPABASE_KEY"
        )

    url, key = _supabase_credentials()
    supabase = create_client(url, key)
    return supabase
