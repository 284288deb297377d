"""Infrastructure layer: persistence, cache, and security adapters."""
