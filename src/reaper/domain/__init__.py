"""Domain layer: pure reconciliation logic and the ports it drives."""
