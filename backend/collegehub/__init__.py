"""Application package for the College Hub backend.

This package exposes the service, repository, model and component
modules used by the FastAPI application. Individual modules contain the
concrete implementations and documentation.
"""
