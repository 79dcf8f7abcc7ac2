"""Leafy Life café back office API."""
