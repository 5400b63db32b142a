#!/usr/bin/env python3
"""
Test suite.

All tests run without external services:

    # Run all tests
    python -m pytest tests/ -v

    # Skip the SQLite-backed tests
    python -m pytest tests/ -v -m "not db"

Redis and the Wargaming API are mocked; storage tests use an in-memory
SQLite database (see tests/conftest.py).
"""
