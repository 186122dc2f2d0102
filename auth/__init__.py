"""
Token handling for visitor authentication.

This module provides:
- Decoding identity-provider tokens
- Re-signing identity claims as first-party visitor tokens
"""

from .jwt_service import (
    decode_token_claims,
    sanitize_claims,
    sign_visitor_token
)

__all__ = [
    "decode_token_claims",
    "sanitize_claims",
    "sign_visitor_token"
]
