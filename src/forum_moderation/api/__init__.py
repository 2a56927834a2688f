"""HTTP API for the forum moderation service."""
