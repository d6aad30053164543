"""Application layer: use cases, validation, ports and DTOs."""
