"""HTTP handlers for the user directory."""
