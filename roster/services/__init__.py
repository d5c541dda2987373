"""
High-level use cases for the roster app.

Routers and scripts call RosterStore instead of touching the slot directly.
"""
