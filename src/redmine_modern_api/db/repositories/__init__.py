"""
redmine_modern_api.db.repositories

Repository layer (query helpers over the host schema).
"""
