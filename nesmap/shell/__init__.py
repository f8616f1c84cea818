"""Host-facing services built on the layout engine."""
