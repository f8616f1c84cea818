"""Pure layout engine: bank partitioning, segment descriptors, mapper variants."""
