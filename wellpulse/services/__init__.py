"""Business logic. Modules here take a SQLAlchemy session and raise ``wellpulse.core.errors`` types."""
