"""Boundary adapters: database and blob storage."""
