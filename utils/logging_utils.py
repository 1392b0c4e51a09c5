"""Helpers that keep buyer and seller contact details out of log lines."""

from typing import Any, Dict, Mapping

SENSITIVE_KEYS = frozenset(
    {
        "email",
        "booker_email",
        "booker_number",
        "bought_by",
        "seller_email",
        "seller_contact",
        "seller_phone",
    }
)


def mask_value(value: Any) -> Any:
    """Mask an email, phone number or identifier; non-strings pass through."""
    if not isinstance(value, str) or not value:
        return value
    if "@" in value:
        name, _, domain = value.partition("@")
        return f"{name[:2]}***@{domain}" if name else f"***@{domain}"
    digits = [ch for ch in value if ch.isdigit()]
    if len(digits) >= 6 and len(digits) >= len(value) - 4:
        # phone number: keep the last three digits
        return "***" + "".join(digits[-3:])
    if len(value) > 12:
        return f"{value[:4]}...{value[-4:]}"
    return "***"


def mask_mapping(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of ``data`` with the contact fields masked."""
    return {key: mask_value(value) if key in SENSITIVE_KEYS else value for key, value in data.items()}
