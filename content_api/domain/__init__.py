"""
Domain aggregates handed out by repositories and services.

They are plain pydantic models; persistence rows live in content_api.db.models
and are converted by content_api.mappers.
"""
