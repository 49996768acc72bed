"""Database layer: declarative base, engine and ORM tables."""
