"""Application layer: JSON extraction, strategy generation, strategy chat."""
