"""Core utilities and shared application primitives.

Modules in this package hold configuration, database setup, request
validation, and the HTTP middleware shared by every route.
"""
