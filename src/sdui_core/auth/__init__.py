"""
Identity provider contract and its Supabase implementation.
"""

from .session_gateway import AuthError, AuthListener, SessionGateway, SupabaseSessionGateway

__all__ = ["AuthError", "AuthListener", "SessionGateway", "SupabaseSessionGateway"]
