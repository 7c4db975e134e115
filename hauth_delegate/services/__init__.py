"""Clients for the external services the delegate depends on."""
