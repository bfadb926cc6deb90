# totpvault Test Suite
"""
Test suite including:
- Unit tests for the OTP core
- API / provisioning tests
- Integration tests (event log, logging)
- Security tests (invalid inputs, unavailable crypto)

Run with: pytest
Coverage: pytest --cov=totpvault
"""
