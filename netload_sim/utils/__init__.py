"""Helpers for seeding, metrics export and plotting."""
