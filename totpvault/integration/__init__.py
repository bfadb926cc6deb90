# Integration Module
"""
Audit trail and logging setup:
- Security event log with privacy-preserving user hashes - event_logger.py
- Standard logging configuration - log_handler.py
"""

from .event_logger import (
    EventType,
    SecurityEvent,
    EventLogger,
    get_user_hash,
    create_event_logger,
)

from .log_handler import configure_logging

__all__ = [
    'EventType',
    'SecurityEvent',
    'EventLogger',
    'get_user_hash',
    'create_event_logger',
    'configure_logging',
]
