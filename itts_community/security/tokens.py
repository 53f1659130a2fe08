import base64
import hashlib
import secrets
from datetime import timedelta
from typing import Tuple

from itts_community.utils.timeutil import utcnow


class TokenManager:
    """Manager for generating and verifying opaque tokens."""

    # 256 bits of entropy
    REFRESH_TOKEN_BYTES = 32
    VERIFICATION_TOKEN_BYTES = 32

    @staticmethod
    def hash_token(raw_token: str) -> str:
        """SHA-256 hex digest (64 chars), the only form ever persisted."""
        return hashlib.sha256(raw_token.encode()).hexdigest()

    @staticmethod
    def generate_refresh_token() -> Tuple[str, str]:
        """
        Generate a secure refresh token.

        Returns:
            Tuple containing (raw_token, hashed_token)

        Security Notes:
            - Raw token is 32 random bytes rendered as 64 hex characters
            - Only the SHA-256 hash is stored; the raw value is handed to the
              client exactly once
        """
        raw_token = secrets.token_hex(TokenManager.REFRESH_TOKEN_BYTES)
        return raw_token, TokenManager.hash_token(raw_token)

    @staticmethod
    def generate_verification_token() -> Tuple[str, str]:
        """
        Generate an e-mail verification token.

        Returns:
            Tuple containing (raw_token, hashed_token). The raw token is
            URL-safe base64 without padding so it can travel in a query string.
        """
        raw = secrets.token_bytes(TokenManager.VERIFICATION_TOKEN_BYTES)
        raw_token = base64.urlsafe_b64encode(raw).rstrip(b"=").decode()
        return raw_token, TokenManager.hash_token(raw_token)

    @staticmethod
    def calculate_expiry_time(ttl: timedelta):
        """
        Calculate the expiry datetime for a token.

        Args:
            ttl: Lifetime of the token

        Returns:
            Naive UTC datetime when the token expires
        """
        return utcnow() + ttl

    @staticmethod
    def verify_token(raw_token: str, stored_hash: str) -> bool:
        """
        Verify if a raw token matches its stored hash.

        Args:
            raw_token: The raw token string to verify
            stored_hash: The previously stored hash to compare against

        Returns:
            True if token matches hash, False otherwise
        """
        return secrets.compare_digest(TokenManager.hash_token(raw_token), stored_hash)
