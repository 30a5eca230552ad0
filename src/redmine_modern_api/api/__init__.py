"""
redmine_modern_api.api

API package for the Redmine Modern API service.

Responsibilities:
- FastAPI app factory and router modules.
- Response envelope and error translation.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to services.
