"""Shared utilities used across the reservation assistant."""

from typing import Optional


def mask_phone(value: Optional[str]) -> Optional[str]:
    """Hide all but the last four characters of a phone number.

    Examples:
        >>> mask_phone("6281234567890")
        '*********7890'
        >>> mask_phone("0812")
        '***'
    """
    if not value:
        return value
    if len(value) <= 4:
        return "***"
    return "*" * (len(value) - 4) + value[-4:]


def mask_email(value: Optional[str]) -> Optional[str]:
    """Hide the local part of an email address except its first and last character.

    Examples:
        >>> mask_email("budi.santoso@example.com")
        'b***o@example.com'
        >>> mask_email("ab@example.com")
        '**@example.com'
    """
    if not value:
        return value
    local, _, domain = value.partition("@")
    if not domain:
        return "***"
    masked = "**" if len(local) <= 2 else f"{local[0]}***{local[-1]}"
    return f"{masked}@{domain}"
