"""
Password Policy Utilities
Provides password validation rules for members and administrators.
"""

import re
from typing import List


MIN_MEMBER_PASSWORD_LENGTH = 6
MIN_ADMIN_PASSWORD_LENGTH = 12

COMMON_PASSWORDS = {
    "password",
    "password123",
    "admin",
    "admin123",
    "letmein",
    "qwerty",
    "welcome",
    "changeme",
}


def validate_member_password(password: str) -> List[str]:
    """Members only need a minimum length."""
    if not password:
        return ["Password is required"]
    if len(password) < MIN_MEMBER_PASSWORD_LENGTH:
        return [f"Password must be at least {MIN_MEMBER_PASSWORD_LENGTH} characters long"]
    return []


def validate_admin_password(password: str) -> List[str]:
    """
    Validate administrator password strength and return a list of errors.
    """
    errors: List[str] = []

    if not password:
        return ["Password is required"]

    if len(password) < MIN_ADMIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_ADMIN_PASSWORD_LENGTH} characters long")

    if not re.search(r"[a-z]", password):
        errors.append("Password must include a lowercase letter")

    if not re.search(r"[A-Z]", password):
        errors.append("Password must include an uppercase letter")

    if not re.search(r"\d", password):
        errors.append("Password must include a number")

    if not re.search(r"[^A-Za-z0-9]", password):
        errors.append("Password must include a symbol")

    if password.lower() in COMMON_PASSWORDS:
        errors.append("Password is too common")

    return errors
