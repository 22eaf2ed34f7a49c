"""
Test Suite

Structure:
- tests/unit/: Tests for individual components with the Binance API mocked

Uses pytest with pytest-asyncio for testing async functionality.
"""
