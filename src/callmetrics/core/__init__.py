"""Core instrumentation logic: models, key construction and observers."""
