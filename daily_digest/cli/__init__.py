"""CLI module for the daily digest generator."""
