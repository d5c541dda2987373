"""
Core utilities shared across the roster app.

This package hosts configuration, logging setup and request-level security
helpers (CSRF). Services and routers should depend on these primitives
instead of reading os.environ or configuring logging themselves.
"""
