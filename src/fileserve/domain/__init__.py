"""Domain layer for FileServe: entities, exceptions and the retrieval services."""
