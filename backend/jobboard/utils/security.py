import hmac
import secrets


def generate_token() -> str:
    return secrets.token_hex(32)


def secrets_match(expected: str, provided: str) -> bool:
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))
