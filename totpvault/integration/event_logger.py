"""
Security Event Logger Module

Records one-time password events for an audit trail.

Features:
- Secret issuance events
- TOTP verification success / failure events
- Privacy-preserving user hashes (SHA-256)
- Callbacks for forwarding events elsewhere
- JSON export of the recorded history

Every event is also emitted on the ``totpvault.audit`` logger. Secrets and
OTP codes are never part of an event.
"""

import hashlib
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Callable


logger = logging.getLogger("totpvault.audit")


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
SHORT_HASH_LENGTH = 16


# ============================================================================
# Privacy Functions
# ============================================================================

def get_user_hash(username: str) -> str:
    """
    Compute privacy-preserving hash of username.

    Events can be correlated per user without the username ever being
    stored in plaintext.

    Args:
        username: The plaintext username

    Returns:
        Hex-encoded SHA-256 hash of the username
    """
    return hashlib.sha256(username.encode()).hexdigest()


def get_user_hash_short(username: str) -> str:
    """First 16 characters of the user hash, for display."""
    return get_user_hash(username)[:SHORT_HASH_LENGTH]


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of security events that can be logged."""
    SECRET_ISSUED = "secret_issued"
    TOTP_VERIFIED = "totp_verified"
    TOTP_FAILED = "totp_failed"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class SecurityEvent:
    """
    Represents a security event to be logged.

    All user-identifying information is hashed for privacy.
    """
    event_type: EventType
    user_hash: str  # SHA-256 hash of username
    timestamp: int  # Unix timestamp
    details: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize the event as compact JSON."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'user': self.user_hash[:SHORT_HASH_LENGTH],
            'time': self.timestamp,
            'iso_time': datetime.fromtimestamp(self.timestamp).isoformat(),
            'details': self.details,
        }, separators=(',', ':'))

    @classmethod
    def from_json(cls, data_str: str) -> 'SecurityEvent':
        """Parse an event produced by to_json."""
        data = json.loads(data_str)
        return cls(
            event_type=EventType(data['type']),
            user_hash=data['user'],
            timestamp=data['time'],
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | "
            f"user:{self.user_hash[:8]}..."
        )


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    In-memory security audit trail for OTP events.

    Example:
        >>> events = EventLogger()
        >>> events.log_totp("alice", success=True).event_type
        <EventType.TOTP_VERIFIED: 'totp_verified'>
    """

    def __init__(self, max_events: Optional[int] = None):
        """
        Initialize the event logger.

        Args:
            max_events: Keep at most this many recent events (None = all)
        """
        self._events: List[SecurityEvent] = []
        self._max_events = max_events
        self._callbacks: List[Callable[[SecurityEvent], None]] = []

    def _add_event(self, event: SecurityEvent) -> None:
        """Record an event, emit it and notify callbacks."""
        self._events.append(event)
        if self._max_events is not None and len(self._events) > self._max_events:
            del self._events[:len(self._events) - self._max_events]

        level = logging.WARNING if event.event_type == EventType.TOTP_FAILED else logging.INFO
        logger.log(level, "%s user=%s", event.event_type.value,
                   event.user_hash[:SHORT_HASH_LENGTH])

        for callback in self._callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Event callback %r failed", callback)

    def add_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ========================================================================
    # OTP Events
    # ========================================================================

    def log_secret_issued(self, username: str, encoding: str,
                          digits: int, time_step: int) -> SecurityEvent:
        """
        Log that a new shared secret was issued to a user.

        Args:
            username: The username (will be hashed)
            encoding: Secret encoding ("base32" or "hex")
            digits: OTP length configured for the secret
            time_step: Time step in seconds

        Returns:
            The logged event
        """
        event = SecurityEvent(
            event_type=EventType.SECRET_ISSUED,
            user_hash=get_user_hash(username),
            timestamp=int(time.time()),
            details={
                'encoding': encoding,
                'digits': digits,
                'step': time_step,
            }
        )
        self._add_event(event)
        return event

    def log_totp(self, username: str, success: bool,
                 window_millis: int = 0) -> SecurityEvent:
        """Log TOTP verification attempt."""
        event = SecurityEvent(
            event_type=EventType.TOTP_VERIFIED if success else EventType.TOTP_FAILED,
            user_hash=get_user_hash(username),
            timestamp=int(time.time()),
            details={'window_ms': window_millis},
        )
        self._add_event(event)
        return event

    # ========================================================================
    # Retrieval
    # ========================================================================

    def get_all_events(self) -> List[SecurityEvent]:
        """Get a copy of all recorded events, oldest first."""
        return list(self._events)

    def get_user_events(self, username: str) -> List[SecurityEvent]:
        """Get all events for a specific user."""
        short_hash = get_user_hash_short(username)
        return [
            e for e in self._events
            if e.user_hash[:SHORT_HASH_LENGTH] == short_hash
        ]

    def get_events_by_type(self, event_type: EventType) -> List[SecurityEvent]:
        """Get all events of a specific type."""
        return [e for e in self._events if e.event_type == event_type]

    def get_recent_events(self, count: int = 10) -> List[SecurityEvent]:
        """Get the most recent events."""
        return self._events[-count:] if count > 0 else []

    def failed_attempts(self, username: str) -> int:
        """Count failed TOTP verifications recorded for a user."""
        return sum(
            1 for e in self.get_user_events(username)
            if e.event_type == EventType.TOTP_FAILED
        )

    def export_log(self) -> str:
        """Export the recorded events as a JSON array."""
        return json.dumps([json.loads(e.to_json()) for e in self._events])

    @classmethod
    def import_log(cls, json_str: str) -> 'EventLogger':
        """Rebuild an event logger from export_log output."""
        events = cls()
        for item in json.loads(json_str):
            events._events.append(SecurityEvent.from_json(json.dumps(item)))
        return events

    def __len__(self) -> int:
        return len(self._events)


def create_event_logger(max_events: Optional[int] = None) -> EventLogger:
    """Create a new event logger."""
    return EventLogger(max_events=max_events)
