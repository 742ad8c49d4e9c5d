"""Domain Layer: cache value objects, the entry envelope, interfaces and errors."""
