"""Persisted credential storage."""
