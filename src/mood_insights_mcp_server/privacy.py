"""
Privacy utilities for the Mood Insights MCP Server.

Member ids are replaced with salted hashes before analysis payloads leave the
server when redaction is requested.
"""

import copy
import hashlib
from typing import Any, Dict, Optional

from .config import get_config

HASH_PREFIX = "hash:"


def hash_member_id(member_id: str, salt: Optional[bytes] = None) -> str:
    """
    Hash a member ID using BLAKE2b with per-session salt.

    Args:
        member_id: The member identifier to hash
        salt: Optional salt (uses session salt if not provided)

    Returns:
        Hashed member ID in format "hash:xxxxxxxx"
    """
    if not member_id:
        return member_id

    # Skip if already hashed
    if member_id.startswith(HASH_PREFIX):
        return member_id

    # Get salt from config if not provided
    if salt is None:
        salt = get_config().session_salt

    # Use BLAKE2b for hashing (16 bytes = 32 hex chars)
    h = hashlib.blake2b(member_id.encode("utf-8"), salt=salt, digest_size=16)

    return f"{HASH_PREFIX}{h.hexdigest()[:8]}"  # Use first 8 chars for brevity


def redact_analysis(payload: Dict[str, Any], salt: Optional[bytes] = None) -> Dict[str, Any]:
    """
    Replace every member id in an analysis payload with its hash.

    The same member gets the same hash everywhere in the payload, so pairs,
    support network and stress points can still be cross-referenced.

    Args:
        payload: Camel-case payload from ``CrossAnalysisResult.to_payload()``
        salt: Optional salt (uses session salt if not provided)

    Returns:
        A redacted copy; the input is left untouched
    """
    if salt is None:
        salt = get_config().session_salt

    result = copy.deepcopy(payload)

    for pair in result.get("correlations", []):
        for key in ("memberA", "memberB"):
            if key in pair:
                pair[key] = hash_member_id(pair[key], salt)

    dynamics = result.get("groupDynamics", {})
    for key in ("supportNetwork", "stressPoints"):
        if key in dynamics:
            dynamics[key] = sorted(hash_member_id(member, salt) for member in dynamics[key])

    return result


def sanitize_analysis(payload: Dict[str, Any], redact: bool = True) -> Dict[str, Any]:
    """
    Apply the configured privacy filters to an analysis payload.

    Args:
        payload: Camel-case analysis payload
        redact: Whether the caller asked for redaction

    Returns:
        The payload, with member ids hashed when redaction applies
    """
    config = get_config()
    should_hash = redact and config.privacy.hash_identifiers

    if not should_hash:
        return payload
    return redact_analysis(payload, config.session_salt)
