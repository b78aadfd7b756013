"""TOTP helpers for two-factor authentication."""

import pyotp

from config import get_settings

settings = get_settings()

# Accept codes from two steps either side of now to absorb clock drift
VALID_WINDOW = 2


def generate_secret() -> str:
    """Generate a new base32 TOTP secret."""
    return pyotp.random_base32(length=32)


def provisioning_uri(secret: str, email: str) -> str:
    """Build the ``otpauth://`` URI that authenticator apps import."""
    return pyotp.TOTP(secret).provisioning_uri(
        name=email, issuer_name=settings.two_factor_issuer
    )


def verify_code(secret: str, code: str) -> bool:
    """Check a 6-digit code against ``secret``."""
    return pyotp.TOTP(secret).verify(str(code).strip(), valid_window=VALID_WINDOW)
