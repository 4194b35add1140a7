"""Infrastructure adapters (LLM chat clients)."""
