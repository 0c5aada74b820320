"""Markdown digest rendering and atomic file output."""
