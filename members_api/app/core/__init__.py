"""Configuration, logging, error types and database access."""
