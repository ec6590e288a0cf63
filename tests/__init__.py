"""
Test Suite

Structure:
- tests/unit/: Tests for individual components (normalizer, publisher,
  backoff, keepalive, connection lifecycle, config, API)

No test opens a real connection to Gate.io; transports are faked.

Uses pytest with pytest-asyncio for testing async functionality.
"""
