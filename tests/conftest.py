"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins the environment so settings never pick up a developer's .env file.
"""

import os

# Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

os.environ.setdefault("CRPT_API_URL", "https://crpt.test/api/v3/lk/documents/create")
os.environ.setdefault("CRPT_TIME_UNIT", "seconds")
os.environ.setdefault("CRPT_REQUEST_LIMIT", "5")
