"""User-facing entry points: CLI and HTTP API."""
