"""Application layer: DTOs, interfaces (ports), and use-case services."""
