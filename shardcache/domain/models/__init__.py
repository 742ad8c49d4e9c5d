"""Domain Models: value objects and the persisted cache entry."""
