"""Weak Ties core: profile schema, contact ingestion and AI services."""
