"""Upstream adapters: each fetches one service and returns plain dicts (or None on failure)."""
