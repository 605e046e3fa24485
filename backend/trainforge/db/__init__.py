"""Database package: engine, session factory and ORM models."""
