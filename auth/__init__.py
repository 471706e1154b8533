"""
auth — User authentication module.

Provides:
  • Signed token creation & verification (HMAC-SHA256, 3h lifetime)
  • ``get_current_user_id`` FastAPI dependency reading the identity the
    bearer middleware put on ``request.state``
"""
