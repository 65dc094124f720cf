from mahjong_ledger.auth.context import AuthContext, session_registry
from mahjong_ledger.auth.dependencies import get_auth_context
from mahjong_ledger.auth.jwt import create_access_token, decode_token

__all__ = [
    "AuthContext",
    "create_access_token",
    "decode_token",
    "get_auth_context",
    "session_registry",
]
