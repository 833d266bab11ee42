"""
auth — User authentication module.

Provides:
  • Password hashing (bcrypt, work factor 10 by default)
  • JWT token issuance & verification (``TokenService``)
  • Register / Login / profile API routes
  • ``get_current_user_id`` FastAPI dependency (route guard)
"""
