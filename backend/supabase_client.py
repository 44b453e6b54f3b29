# supabase_client.py — Supabase client initialization, auth and edge functions

import json
import logging

from supabase import create_client, Client
from config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_ANON_KEY

logger = logging.getLogger(__name__)

# Global Supabase client instances
_supabase_admin: Client = None
_supabase_client: Client = None


def get_supabase_admin() -> Client:
    """
    Get Supabase client with service role key (admin privileges).
    Use for backend operations that require elevated permissions.
    """
    global _supabase_admin

    if _supabase_admin is None:
        if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment variables")

        _supabase_admin = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)

    return _supabase_admin


def get_supabase_client() -> Client:
    """
    Get Supabase client with anonymous key (limited permissions).
    Use for auth calls made on behalf of a learner.
    """
    global _supabase_client

    if _supabase_client is None:
        if not SUPABASE_URL or not SUPABASE_ANON_KEY:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment variables")

        _supabase_client = create_client(SUPABASE_URL, SUPABASE_ANON_KEY)

    return _supabase_client


def is_supabase_configured() -> bool:
    """Check if Supabase is properly configured with required environment variables."""
    return bool(SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY and SUPABASE_ANON_KEY)


# Authentication helpers
def sign_up_user(email: str, password: str, metadata: dict = None):
    """Register a new user with Supabase Auth."""
    supabase = get_supabase_client()
    return supabase.auth.sign_up({
        "email": email,
        "password": password,
        "options": {
            "data": metadata or {}
        }
    })


def sign_in_user(email: str, password: str):
    """Sign in a user with Supabase Auth."""
    supabase = get_supabase_client()
    return supabase.auth.sign_in_with_password({
        "email": email,
        "password": password
    })


# Edge functions
def invoke_function(name: str, body: dict) -> dict:
    """
    Call a Supabase Edge Function with the service role and return its JSON body.
    Errors raised by the functions client propagate to the caller.
    """
    supabase = get_supabase_admin()
    logger.info(f"Invoking edge function {name}")
    resp = supabase.functions.invoke(name, invoke_options={"body": body})
    if isinstance(resp, (bytes, bytearray)):
        resp = resp.decode("utf-8")
    if isinstance(resp, str):
        return json.loads(resp) if resp else {}
    return resp or {}
