"""
redmine_modern_api.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Map the host Redmine tables, set up the engine/session and repositories.
"""

# Package marker.
