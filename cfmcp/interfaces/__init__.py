"""User-facing interfaces for cfmcp."""
