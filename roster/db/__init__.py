"""SQL backend for the durable slot: one engine per database URL and the slot table."""
