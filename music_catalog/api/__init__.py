"""HTTP endpoints for the music catalog."""
