"""
Random identifiers for users, rooms, session tokens and join codes
"""
import secrets

# No 0/O or 1/I so codes can be read aloud and typed back
JOIN_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
JOIN_CODE_LENGTH = 6


def generate_id() -> str:
    return secrets.token_hex(16)


def generate_token() -> str:
    return secrets.token_hex(32)


def generate_join_code(length: int = JOIN_CODE_LENGTH) -> str:
    return "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(length))
