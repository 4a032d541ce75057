# Photo Catalog Test Suite
"""
Test suite for the photo catalog.

Service and storage tests run against every backend; integration tests
drive the HTTP API and the terminal menu.

Key principle: Test behavior, not implementation.
"""
