"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for each area (menus, security).
Menu reads hand out domain aggregates; security reads return ORM rows.
"""
