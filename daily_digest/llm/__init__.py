"""Summarization client: request building, retries and response validation."""
