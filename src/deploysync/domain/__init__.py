"""Domain layer: models, ports and the reconciliation engine."""
