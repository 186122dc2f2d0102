"""
JWT Token Service
===============

This module provides functions for reading identity-provider tokens and for
issuing the short-lived first-party tokens handed to visitors of published
content.

The service follows these principles:
- Identity-provider tokens are decoded, not verified: the provider already
  authenticated the token exchange that produced them
- Issued tokens carry the provider's claims minus its own timing claims
- Issued tokens expire after VISITOR_TOKEN_EXPIRY_SECONDS (one hour by default)
"""

import jwt
import time
import logging
from typing import Dict, Optional, Any

from config import get_settings
from runtime.errors import SigningFailure

# Get settings
settings = get_settings()

# Set up logger
logger = logging.getLogger(__name__)

# Claims owned by the issuer of a token; never copied onto a re-issued token
ISSUER_TIMING_CLAIMS = ("iat", "exp")

def decode_token_claims(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode the claims of a JWT without verifying its signature.

    Args:
        token: The encoded JWT

    Returns:
        Dict of claims, or None if the token cannot be decoded
    """
    try:
        return jwt.decode(
            token,
            options={"verify_signature": False}
        )
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        return None

def sanitize_claims(claims: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of the claims without the issuer's iat and exp."""
    return {key: value for key, value in claims.items() if key not in ISSUER_TIMING_CLAIMS}

def sign_visitor_token(
    claims: Dict[str, Any],
    signing_key: str,
    expiry_seconds: Optional[int] = None,
    now: Optional[float] = None
) -> str:
    """
    Re-sign identity claims as a first-party visitor token.

    Args:
        claims: Claims decoded from the identity provider's token
        signing_key: The installation's signing secret
        expiry_seconds: Token lifetime (default VISITOR_TOKEN_EXPIRY_SECONDS)
        now: Current Unix time, for tests

    Returns:
        The encoded token

    Raises:
        SigningFailure: If the claims cannot be signed with the key
    """
    if expiry_seconds is None:
        expiry_seconds = settings.VISITOR_TOKEN_EXPIRY_SECONDS
    if now is None:
        now = time.time()

    payload = {
        **sanitize_claims(claims),
        "exp": int(now) + expiry_seconds
    }

    try:
        return jwt.encode(
            payload,
            signing_key,
            algorithm=settings.VISITOR_TOKEN_ALGORITHM
        )
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        logger.error(f"Error signing visitor token: {str(e)}")
        raise SigningFailure("Error: Could not sign JWT token")
