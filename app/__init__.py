"""
Job Portal
A job board with a community feed.

Architecture:
- FastAPI: REST API under /api
- MongoDB: every entity is a document (users, companies, jobs,
  applications, posts, comments)
- app.client: Python client for the API
"""

__version__ = "1.0.0"
