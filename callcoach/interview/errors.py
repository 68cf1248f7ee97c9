"""
Call failure taxonomy and classification of raw vendor errors.
"""
from typing import Any, Dict, Optional

from .models import FailureKind, FailureReason


class CallError(Exception):
    """Base class for call session errors."""


class AudioInputDeniedError(CallError):
    """Audio input could not be acquired (refused by the user or the OS)."""


class MissingCredentialError(CallError):
    """Required external configuration is absent."""


class TranscriptDrainedError(CallError):
    """The transcript was already handed off."""


class FeedbackSubmissionError(CallError):
    """The feedback gateway could not be reached or rejected the request."""


PERMISSION_ERROR_NAMES = {"notallowederror", "permissiondeniederror", "securityerror"}
PERMISSION_PHRASES = ("permission denied", "permission dismissed")

FAILURE_MESSAGES = {
    FailureKind.PERMISSION_DENIED: "Microphone access was denied. Allow microphone access and try again.",
    FailureKind.MISSING_CREDENTIAL: "The voice service is not configured. Please contact support.",
    FailureKind.CHANNEL_ERROR: "The call could not be completed because of a connection problem.",
    FailureKind.UNKNOWN: "Something went wrong with the call.",
}


def _mentions_permission(*parts: Optional[str]) -> bool:
    for part in parts:
        if not part:
            continue
        lowered = part.lower()
        if lowered in PERMISSION_ERROR_NAMES or any(p in lowered for p in PERMISSION_PHRASES):
            return True
    return False


def _describe_mapping(payload: Dict[str, Any]) -> Optional[str]:
    """Extract "<type>: <message>" from a loosely typed vendor payload."""
    nested = payload.get("error")
    if isinstance(nested, dict):
        inner = _describe_mapping(nested)
        if inner:
            return inner
    elif isinstance(nested, str) and nested.strip():
        return nested.strip()

    kind = payload.get("type") or payload.get("name")
    message = payload.get("message") or payload.get("errorMsg")
    kind = str(kind).strip() if kind else ""
    message = str(message).strip() if message else ""
    if kind and message:
        return f"{kind}: {message}"
    return kind or message or None


def classify_failure(raw: Any) -> FailureReason:
    """
    Map a raw failure payload to exactly one FailureReason.

    Args:
        raw: Exception, vendor error dict, string, or anything else

    Returns:
        FailureReason tagged PermissionDenied, MissingCredential,
        ChannelError or Unknown
    """
    if isinstance(raw, FailureReason):
        return raw

    if isinstance(raw, (AudioInputDeniedError, PermissionError)):
        return FailureReason(FailureKind.PERMISSION_DENIED, str(raw) or type(raw).__name__)

    if isinstance(raw, MissingCredentialError):
        return FailureReason(FailureKind.MISSING_CREDENTIAL, str(raw))

    if isinstance(raw, BaseException):
        detail = f"{type(raw).__name__}: {raw}" if str(raw) else type(raw).__name__
        if _mentions_permission(type(raw).__name__, str(raw)):
            return FailureReason(FailureKind.PERMISSION_DENIED, detail)
        return FailureReason(FailureKind.CHANNEL_ERROR, detail)

    if isinstance(raw, dict):
        detail = _describe_mapping(raw)
        if not detail:
            return FailureReason(FailureKind.UNKNOWN, repr(raw))
        nested = raw.get("error") if isinstance(raw.get("error"), dict) else {}
        names = (raw.get("name"), raw.get("type"), nested.get("name"), nested.get("type"))
        if _mentions_permission(*[str(n) for n in names if n], detail):
            return FailureReason(FailureKind.PERMISSION_DENIED, detail)
        return FailureReason(FailureKind.CHANNEL_ERROR, detail)

    if isinstance(raw, str) and raw.strip():
        if _mentions_permission(raw):
            return FailureReason(FailureKind.PERMISSION_DENIED, raw.strip())
        return FailureReason(FailureKind.CHANNEL_ERROR, raw.strip())

    return FailureReason(FailureKind.UNKNOWN, "" if raw is None else repr(raw))


def describe_failure(reason: Optional[FailureReason]) -> Optional[str]:
    """User-facing message for a failure, None when there is none."""
    if reason is None:
        return None
    return FAILURE_MESSAGES.get(reason.kind, FAILURE_MESSAGES[FailureKind.UNKNOWN])
