"""Service layer: business rules on top of the SQLite store."""
