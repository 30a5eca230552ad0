"""
redmine_modern_api.auth

Authentication/authorization package.

Responsibilities:
- Gatekeeper (password login, API-key lookup, token rotation).
- FastAPI auth dependencies (Principal) and project visibility checks.
"""

# Package marker.
