"""Database package: declarative base and table naming."""
