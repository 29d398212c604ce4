"""Pydantic models for the VLSM calculator."""
