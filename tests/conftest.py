"""Pytest configuration shared across test modules."""

import os

os.environ.setdefault("VAULTLINT_LOG_LEVEL", "WARNING")
os.environ.pop("VAULTLINT_WORKERS", None)
