"""Authentication for voicetasks."""
