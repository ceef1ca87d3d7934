import hashlib
import re
import secrets

PASSWORD_HASH_ITERATIONS = 120_000
MIN_PASSWORD_LENGTH = 8

WALLET_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def hash_password(raw_password: str) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        raw_password.encode("utf-8"),
        salt,
        PASSWORD_HASH_ITERATIONS,
    )
    return f"{PASSWORD_HASH_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(raw_password: str, stored_hash: str) -> bool:
    try:
        iterations_raw, salt_hex, digest_hex = stored_hash.split("$", 2)
        iterations = int(iterations_raw)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
    except (ValueError, TypeError):
        return False
    computed = hashlib.pbkdf2_hmac("sha256", raw_password.encode("utf-8"), salt, iterations)
    return secrets.compare_digest(computed, expected)


def create_session_token() -> str:
    return secrets.token_hex(32)


def normalize_email(raw: str) -> str:
    return raw.strip().lower()


def is_wallet_address(value: str | None) -> bool:
    return bool(value) and WALLET_ADDRESS_RE.match(value.strip()) is not None


def normalize_wallet_address(value: str) -> str:
    """Lowercased ``0x`` address; raises ``ValueError`` when malformed."""
    candidate = (value or "").strip()
    if not WALLET_ADDRESS_RE.match(candidate):
        raise ValueError("invalid_wallet_address")
    return candidate.lower()
