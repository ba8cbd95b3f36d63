"""Reference REST API."""
