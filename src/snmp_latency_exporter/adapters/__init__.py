"""Adapters binding the core ports to concrete libraries."""
