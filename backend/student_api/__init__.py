"""Application package for the student records service.

This package exposes the store, validation and summary modules used by
the FastAPI application. It is intentionally lightweight; individual
modules contain the concrete implementations and documentation.
"""
