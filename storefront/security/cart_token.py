"""
Cart Token

Cart identifiers travel to the browser as signed, expiring JWTs so that a
client can neither read another session's cart ID nor forge one.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
AUDIENCE = "storefront-cart"


class CartTokenCodec:
    """Issues and verifies cart tokens"""

    def __init__(self, secret: str, max_age: timedelta = timedelta(days=30)):
        self._secret = secret
        self.max_age = max_age

    def issue(self, cart_id: str, now: Optional[datetime] = None) -> str:
        """Create a token for cart_id valid for max_age"""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": cart_id,
            "aud": AUDIENCE,
            "iat": issued_at,
            "exp": issued_at + self.max_age,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def read(self, token: Optional[str]) -> Optional[str]:
        """Return the cart ID in token, or None if missing, expired or forged"""
        if not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                audience=AUDIENCE,
            )
        except jwt.ExpiredSignatureError:
            logger.info("Cart token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected cart token: {e}")
            return None
        return payload.get("sub")
