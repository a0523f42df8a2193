"""Adapters connecting observers to registries and host transports."""
