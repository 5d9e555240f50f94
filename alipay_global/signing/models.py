"""
Signing Models
==============
Data models and capability protocols for request signing.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Protocol, Union, runtime_checkable


class HttpMethod(str, Enum):
    """HTTP methods covered by the signature protocol."""
    GET = "GET"
    POST = "POST"


@runtime_checkable
class Signable(Protocol):
    """Anything that can render itself to a deterministic signable string."""

    def to_signable(self) -> str:
        ...


@runtime_checkable
class PrivateKeyHolder(Protocol):
    """Holds the private key used to sign outbound messages."""

    def get_private_key(self) -> Any:
        ...


@runtime_checkable
class PublicKeyHolder(Protocol):
    """Holds the counterparty public key used to verify inbound messages."""

    def get_public_key(self) -> Any:
        ...


SignablePayload = Union[str, Signable]


def format_timestamp(moment: datetime) -> str:
    """
    Render a datetime as RFC3339 UTC with seconds precision.
    
    Naive datetimes are assumed to already be UTC. The result is the exact
    string that must be sent in the ``Request-Time``/``Response-Time`` header.
    
    Example:
        >>> format_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc))
        '2024-01-01T00:00:00+00:00'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).replace(microsecond=0).isoformat()


@dataclass(frozen=True)
class SigningContext:
    """Everything besides the payload that goes into a canonical string."""
    http_method: HttpMethod
    path: str
    counterparty_id: str
    timestamp: str

    @classmethod
    def now(
        cls,
        http_method: Union[HttpMethod, str],
        path: str,
        counterparty_id: str,
        moment: Optional[datetime] = None,
    ) -> "SigningContext":
        """Build a context stamped with the current (or given) UTC time."""
        return cls(
            http_method=HttpMethod(http_method.upper()),
            path=path,
            counterparty_id=counterparty_id,
            timestamp=format_timestamp(moment or datetime.now(timezone.utc)),
        )


@dataclass(frozen=True)
class SignatureHeader:
    """Parsed ``Signature`` header value."""
    signature: str
    algorithm: Optional[str] = None
    key_version: Optional[str] = None


@dataclass(frozen=True)
class InboundSignature:
    """Signature metadata read from an inbound response or webhook."""
    client_id: str
    timestamp: str
    signature: str
