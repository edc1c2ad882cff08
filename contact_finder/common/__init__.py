"""Shared infrastructure: configuration, logging, errors, JSON and LLM helpers."""
