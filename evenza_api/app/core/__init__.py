"""Core primitives: configuration, logging, persistence and security."""
