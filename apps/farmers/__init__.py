"""Farmers (농가) and their fields (농지)."""
