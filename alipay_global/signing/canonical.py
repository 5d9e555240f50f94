"""
Canonical Request
=================
Deterministic rendering of a request into the string that gets signed.
"""

from typing import Union

from .models import HttpMethod, Signable, SignablePayload, SigningContext

# Bumped whenever the layout of the canonical string changes
CANONICAL_FORM_VERSION = "1"


def serialize_payload(payload: SignablePayload) -> str:
    """
    Return the serialized form of a payload.
    
    Strings are taken verbatim (raw bodies must never be re-encoded);
    anything else must implement ``Signable``.
    """
    if isinstance(payload, str):
        return payload
    if isinstance(payload, Signable):
        return payload.to_signable()
    raise TypeError(f"Payload of type {type(payload).__name__} is not signable")


def build_canonical_request(
    method: Union[HttpMethod, str],
    path: str,
    client_id: str,
    timestamp: str,
    payload: SignablePayload,
) -> str:
    """
    Build the canonical string for a request or response.
    
    The layout is::
    
        <METHOD> <PATH>
        <CLIENT_ID>.<TIMESTAMP>.<PAYLOAD>
    
    Inputs are not validated; the timestamp must be byte-identical to the one
    carried in the time header.
    
    Args:
        method: Upper-case HTTP verb
        path: Request path (no query string)
        client_id: Client identifier issued by the provider
        timestamp: RFC3339 UTC timestamp, seconds precision
        payload: Serialized body or a ``Signable``
        
    Returns:
        Canonical string
    """
    if isinstance(method, HttpMethod):
        method = method.value
    return f"{method} {path}\n{client_id}.{timestamp}.{serialize_payload(payload)}"


def canonicalize(context: SigningContext, payload: SignablePayload) -> str:
    """Canonical string for ``payload`` under ``context``."""
    return build_canonical_request(
        context.http_method,
        context.path,
        context.counterparty_id,
        context.timestamp,
        payload,
    )
