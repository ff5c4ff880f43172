"""HTTP surface of the wiring engine."""
