"""Persistence layer for voicetasks."""
