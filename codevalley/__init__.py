"""Configuration, database setup, game data model and HTTP application shell for Code Valley."""

__version__ = "0.1.0"