"""Block sinks, cancellation, emission, ROM loading and the host entry point."""
