"""Pydantic schemas for wire events and HTTP contracts."""
