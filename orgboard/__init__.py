"""Orgboard: multi-tenant project management API."""
