"""Core models and schemas for centralized data management."""
