"""Shared configuration, logging, error handling and LLM helpers."""
