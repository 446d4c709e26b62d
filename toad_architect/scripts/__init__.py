"""Operational entry points run outside the HTTP server."""
