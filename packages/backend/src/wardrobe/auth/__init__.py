"""Authentication and session handling.

Learn: Users authenticate with email/password and receive two JWTs:
1. Access token (15 min) → proves recent login, checked on every request
2. Refresh token (7 days) → only used to mint new access tokens

Both travel in HTTP-only cookies, never in response bodies. The refresh
token's SHA-256 fingerprint is stored on the user so logout can revoke it.
"""
