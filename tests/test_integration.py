"""
Integration tests for totpvault.

Tests complete workflows:
- Enrollment: secret issued, app provisioned, first code verified
- Verification attempts recorded in the security event log
- Logging configuration
"""

import json
import logging

import pyotp

from totpvault.core_crypto.secret_codec import Encoding
from totpvault.auth.totp import (
    TOTPGenerator, current_time_millis, generate_base32_secret, issue_secret,
)
from totpvault.integration.event_logger import (
    EventLogger, EventType, SecurityEvent, get_user_hash, create_event_logger,
)
from totpvault.integration.log_handler import configure_logging


KNOWN_SECRET = "NY4A5CPJZ46LXZCP"


class TestEnrollmentFlow:
    """Integration tests for enrolling an authenticator app."""

    def test_issue_provision_verify(self):
        """Secret issued, scanned by an app, app code accepted."""
        events = EventLogger()
        secret, uri = issue_secret("alice@example.com", issuer="Vault",
                                   event_logger=events)

        # The authenticator app reads the URI
        app = pyotp.parse_uri(uri)
        now = current_time_millis()
        app_code = app.at(now // 1000)

        server = TOTPGenerator(secret, account_name="alice@example.com",
                               event_logger=events)
        assert server.verify(app_code, time_millis=now)

        types = [e.event_type for e in events.get_all_events()]
        assert types == [EventType.SECRET_ISSUED, EventType.TOTP_VERIFIED]

    def test_hex_enrollment(self):
        """Hex secrets are provisioned as base-32."""
        secret, uri = issue_secret("bob", encoding=Encoding.HEX)
        server = TOTPGenerator(secret, encoding=Encoding.HEX, account_name="bob")
        app = pyotp.parse_uri(uri)
        now = current_time_millis()
        assert server.verify(app.at(now // 1000), time_millis=now)

    def test_unaligned_secret_enrollment(self):
        """A secret not a multiple of 8 characters still enrolls."""
        server = TOTPGenerator("NY4A5CPJZ46LXZCPAF", account_name="alice")
        app = pyotp.parse_uri(server.get_provisioning_uri())
        assert server.verify(app.at(7451), time_millis=7451000)

        server = TOTPGenerator(generate_base32_secret(26), account_name="bob")
        app = pyotp.parse_uri(server.get_provisioning_uri())
        now = current_time_millis()
        assert server.verify(app.at(now // 1000), time_millis=now)


class TestSecurityEventLogging:
    """Integration tests for the security event log."""

    def test_verification_events_logged(self):
        events = EventLogger()
        gen = TOTPGenerator(KNOWN_SECRET, account_name="alice", event_logger=events)

        gen.verify("325893", time_millis=7455000)
        gen.verify("000001", time_millis=7455000)
        gen.verify("abc", time_millis=7455000)

        assert len(events) == 3
        assert len(events.get_events_by_type(EventType.TOTP_VERIFIED)) == 1
        assert len(events.get_events_by_type(EventType.TOTP_FAILED)) == 2
        assert events.failed_attempts("alice") == 2
        assert events.failed_attempts("bob") == 0

    def test_user_filter(self):
        events = EventLogger()
        events.log_totp("alice", success=True)
        events.log_totp("bob", success=False)
        events.log_totp("alice", success=False)

        assert len(events.get_user_events("alice")) == 2
        assert len(events.get_user_events("bob")) == 1

    def test_privacy_user_hashes(self):
        """Usernames should be hashed, not stored in plaintext."""
        events = EventLogger()
        events.log_totp("secret_username", success=True)

        exported = events.export_log()
        assert "secret_username" not in exported
        assert get_user_hash("secret_username")[:16] in exported

    def test_no_codes_or_secrets_in_events(self):
        events = EventLogger()
        gen = TOTPGenerator(KNOWN_SECRET, account_name="alice", event_logger=events)
        gen.verify("325893", time_millis=7455000)

        exported = events.export_log()
        assert KNOWN_SECRET not in exported
        assert "325893" not in exported

    def test_export_import(self):
        events = EventLogger()
        events.log_secret_issued("alice", "base32", 6, 30)
        events.log_totp("alice", success=True, window_millis=30000)

        imported = EventLogger.import_log(events.export_log())
        assert len(imported) == 2
        assert len(imported.get_user_events("alice")) == 2
        assert imported.get_all_events()[1].details == {'window_ms': 30000}

    def test_event_json(self):
        event = SecurityEvent(
            event_type=EventType.TOTP_FAILED,
            user_hash=get_user_hash("carol"),
            timestamp=1700000000,
        )
        data = json.loads(event.to_json())
        assert data['type'] == "totp_failed"
        assert data['user'] == get_user_hash("carol")[:16]
        assert SecurityEvent.from_json(event.to_json()).event_type == EventType.TOTP_FAILED

    def test_max_events(self):
        events = create_event_logger(max_events=3)
        for i in range(5):
            events.log_totp(f"user{i}", success=True)
        assert len(events) == 3
        assert len(events.get_user_events("user0")) == 0
        assert len(events.get_user_events("user4")) == 1

    def test_recent_events(self):
        events = EventLogger()
        for i in range(5):
            events.log_totp(f"user{i}", success=True)
        assert len(events.get_recent_events(2)) == 2
        assert events.get_recent_events(0) == []

    def test_callbacks(self):
        events = EventLogger()
        seen = []
        events.add_callback(seen.append)
        events.log_totp("alice", success=True)
        events.remove_callback(seen.append)
        events.log_totp("alice", success=True)
        assert len(seen) == 1

    def test_failing_callback_does_not_stop_logging(self, caplog):
        events = EventLogger()

        def broken(event):
            raise RuntimeError("sink down")

        events.add_callback(broken)
        with caplog.at_level(logging.ERROR, logger="totpvault.audit"):
            events.log_totp("alice", success=False)

        assert len(events) == 1
        assert "failed" in caplog.text

    def test_events_emitted_to_logging(self, caplog):
        events = EventLogger()
        with caplog.at_level(logging.INFO, logger="totpvault.audit"):
            events.log_totp("alice", success=True)
            events.log_totp("alice", success=False)

        levels = [r.levelno for r in caplog.records if r.name == "totpvault.audit"]
        assert levels == [logging.INFO, logging.WARNING]
        assert "alice" not in caplog.text


class TestLoggingConfiguration:
    """Tests for configure_logging."""

    def test_single_handler(self):
        name = "totpvault.test_config"
        logger = configure_logging(logging.DEBUG, name=name)
        configure_logging(logging.WARNING, name=name)

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        logger.handlers.clear()
