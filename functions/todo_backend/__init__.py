"""
Backend package for the to-do lists service.

This package provides a FastAPI application that keeps per-session view
state for signed-in users and delegates authentication and persistence to
Firebase, with in-memory stand-ins for development and tests.
"""
