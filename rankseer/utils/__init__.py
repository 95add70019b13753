"""Shared utilities: validation, rate limiting, environment management."""
