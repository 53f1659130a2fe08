import hashlib
import re
from datetime import timedelta

from itts_community.security.passwords import hash_password, verify_password
from itts_community.security.tokens import TokenManager
from itts_community.utils.timeutil import utcnow


def test_refresh_token_is_256_bit_hex():
    raw, hashed = TokenManager.generate_refresh_token()

    assert re.fullmatch(r"[0-9a-f]{64}", raw)
    assert hashed == hashlib.sha256(raw.encode()).hexdigest()
    assert TokenManager.verify_token(raw, hashed)
    assert not TokenManager.verify_token(raw + "0", hashed)


def test_tokens_are_unique():
    assert TokenManager.generate_refresh_token()[0] != TokenManager.generate_refresh_token()[0]


def test_verification_token_is_url_safe():
    raw, hashed = TokenManager.generate_verification_token()

    assert re.fullmatch(r"[A-Za-z0-9_-]{43}", raw)
    assert len(hashed) == 64


def test_expiry_is_in_the_future():
    assert TokenManager.calculate_expiry_time(timedelta(hours=24)) > utcnow() + timedelta(hours=23)


def test_password_hash_roundtrip(app):
    hashed = hash_password("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret-pass", "not-a-bcrypt-hash")
