"""Shared runner, HTTP and logging helpers."""
