# Integration Tests
"""
Integration tests verify complete user workflows through the HTTP API
and the terminal menu.

Principle: Test behavior, not implementation.
"""
