"""HTTP API for voicetasks."""
