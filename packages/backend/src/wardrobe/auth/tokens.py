"""JWT token creation and verification.

Learn: Two token kinds, two secrets.
- Access token: short-lived (15 min), checked on every protected request
- Refresh token: long-lived (7 days), only exchanged for new access tokens

Each kind is signed with its own secret, so leaking one secret does not
let an attacker mint the other kind. Payloads carry only the user id
(plus standard exp/iat/jti): a JWT is signed, not encrypted.

Verification failures of any kind (bad signature, garbage, expired)
surface as the single ``InvalidToken`` error so callers cannot leak which
one happened.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from wardrobe.config import Settings

USER_ID_CLAIM = "userId"


class InvalidToken(Exception):
    """Raised when a token fails verification for any reason."""


class TokenService:
    """Issues and verifies access/refresh tokens.

    Secrets and lifetimes are injected through ``Settings`` at construction.
    """

    def __init__(self, config: Settings):
        self._access_secret = config.access_token_secret
        self._refresh_secret = config.refresh_token_secret
        self._algorithm = config.jwt_algorithm
        self.access_ttl = timedelta(minutes=config.access_token_expire_minutes)
        self.refresh_ttl = timedelta(days=config.refresh_token_expire_days)

    # ─── Issue ──────────────────────────────────────────

    def issue_access_token(self, user_id: str) -> str:
        return self._encode(user_id, self._access_secret, self.access_ttl)

    def issue_refresh_token(self, user_id: str) -> str:
        return self._encode(user_id, self._refresh_secret, self.refresh_ttl)

    def _encode(self, user_id: str, secret: str, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            USER_ID_CLAIM: str(user_id),
            "iat": now,
            "exp": now + ttl,
            # Unique per token: two logins in the same second still get
            # distinct refresh tokens, and therefore distinct fingerprints.
            "jti": secrets.token_hex(8),
        }
        return jwt.encode(payload, secret, algorithm=self._algorithm)

    # ─── Verify ─────────────────────────────────────────

    def verify_access(self, token: str) -> dict:
        return self._decode(token, self._access_secret)

    def verify_refresh(self, token: str) -> dict:
        return self._decode(token, self._refresh_secret)

    def _decode(self, token: str, secret: str) -> dict:
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidToken("Invalid token") from e
        if not isinstance(claims.get(USER_ID_CLAIM), str) or not claims[USER_ID_CLAIM]:
            raise InvalidToken("Invalid token")
        return claims

    # ─── Fingerprint ────────────────────────────────────

    @staticmethod
    def fingerprint(token: str) -> str:
        """SHA-256 hex digest over the whole token.

        Never bcrypt here: bcrypt only reads the first 72 bytes, and JWTs
        from the same secret share a long common prefix, so distinct tokens
        would collide.
        """
        return hashlib.sha256(token.encode("utf-8")).hexdigest()
