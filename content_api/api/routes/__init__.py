"""
API route modules for content and administration.

This package contains subrouters for:
- Menus: site menus and their items
- Users: user administration and role assignment
- Roles: role administration

Routers are included from content_api.api.main (under the /api/v1 prefix).
"""
