"""Pydantic schemas for the record documents and derived views."""
