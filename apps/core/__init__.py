"""Shared building blocks used by every farm app: error kinds, store helpers, identity."""
