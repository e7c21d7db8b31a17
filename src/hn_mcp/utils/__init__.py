"""Configuration, logging and caching utilities."""
