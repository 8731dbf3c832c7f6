"""Bundled default settings and their JSON Schema."""
