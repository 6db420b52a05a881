"""
auth — User authentication module.

Provides:
  • Signed token creation & verification (``TokenService``)
  • Password hashing (bcrypt, configurable work factor)
  • Signup / Login API routes
  • ``get_current_user`` FastAPI dependency
"""
