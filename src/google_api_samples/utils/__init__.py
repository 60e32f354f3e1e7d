"""Shared helpers for dates, console output and log sanitizing."""
