"""Student roster: a single-page FastAPI app backed by one durable slot."""
