"""Request signing for private Upbit API calls."""

import hashlib
import uuid
from typing import Optional
from urllib.parse import urlencode

import jwt

QUERY_HASH_ALG = "SHA512"


def build_query_string(params: dict[str, str]) -> str:
    """URL-encode parameters in sorted key order for the request line or body."""
    return urlencode(sorted(params.items()))


def generate_query_hash(params: dict[str, str]) -> str:
    """
    SHA-512 hex digest of the sorted ``key=value`` pairs joined by ``&``.

    Args:
        params: Request parameters

    Returns:
        Hex digest used as the ``query_hash`` claim
    """
    query_string = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha512(query_string.encode("utf-8")).hexdigest()


def create_access_token(access_key: str, secret_key: str,
                        params: Optional[dict[str, str]] = None) -> str:
    """
    Create an HS256 bearer token for a private API request.

    Args:
        access_key: API access key
        secret_key: API secret used as the HMAC key
        params: Query or form parameters the request carries, if any

    Returns:
        Signed JWT
    """
    payload = {
        "access_key": access_key,
        "nonce": str(uuid.uuid4()),
    }

    if params:
        payload["query_hash"] = generate_query_hash(params)
        payload["query_hash_alg"] = QUERY_HASH_ALG

    return jwt.encode(payload, secret_key, algorithm="HS256")
