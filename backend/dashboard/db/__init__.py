"""Database declarations shared by ORM models and migrations."""
