"""
redmine_modern_api.services

Service layer: read-side views assembled from repositories.
"""

# Package marker.
