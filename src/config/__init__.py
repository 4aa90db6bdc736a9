"""
Configuration loading and validation.

Settings come from environment variables (optionally from a .env file at the
repository root) and are exposed as frozen dataclasses.
"""
