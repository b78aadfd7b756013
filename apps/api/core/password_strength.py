"""Rule-based password feedback shown after signup."""

import re

SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'
COMMON_PATTERNS = ("password", "123456", "qwerty")
ALL_CLEAR_MESSAGE = "Excellent! Your password meets all security requirements"

_REPEATED_CHARACTER = re.compile(r"(.)\1{2,}")


def password_strength_tips(password: str) -> list[str]:
    """Return ordered suggestions for improving ``password``.

    Pure and deterministic. When every check passes the list holds only
    :data:`ALL_CLEAR_MESSAGE`.
    """
    tips: list[str] = []

    if len(password) < 8:
        tips.append("Use at least 8 characters")

    if not re.search(r"[A-Z]", password):
        tips.append("Add an uppercase letter")
    if not re.search(r"[a-z]", password):
        tips.append("Add a lowercase letter")
    if not re.search(r"[0-9]", password):
        tips.append("Add a number")
    if not any(c in SPECIAL_CHARACTERS for c in password):
        tips.append("Use a special character (!@#$%^&*)")

    if password.lower() == password or password.upper() == password:
        tips.append("Mix uppercase and lowercase letters")

    if _REPEATED_CHARACTER.search(password):
        tips.append('Avoid repeating characters (e.g., "aaa", "111")')

    if any(pattern in password for pattern in COMMON_PATTERNS):
        tips.append('Avoid common patterns like "password" or "123456"')

    if not tips:
        tips.append(ALL_CLEAR_MESSAGE)

    return tips
