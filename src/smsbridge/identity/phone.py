"""Phone numbers as the bridge stores them: country code and digits, no ``+``."""

from __future__ import annotations

from types import ModuleType


def _phonenumbers() -> ModuleType:
    try:
        import phonenumbers
    except ImportError as exc:
        raise ImportError(
            "phonenumbers is required to parse formatted phone numbers. "
            "Install it with: pip install smsbridge[phonenumbers]"
        ) from exc
    return phonenumbers


def is_canonical(number: str) -> bool:
    """True for an already-canonical number (8 to 15 digits, nothing else)."""
    return number.isascii() and number.isdigit() and 8 <= len(number) <= 15


def normalize_phone(number: str, default_region: str = "US") -> str:
    """Turn a user-typed phone number into the bridge's canonical digits.

    A bare digit string is tried as "country code included" before falling
    back to *default_region*, so ``"16502530000"`` and ``"650-253-0000"``
    both come out as ``"16502530000"``.

    Raises:
        ImportError: phonenumbers is not installed.
        ValueError: Nothing in *number* parses to a valid number.
    """
    pn = _phonenumbers()
    raw = number.strip()

    attempts: list[tuple[str, str | None]] = [(raw, default_region)]
    if raw.isdigit():
        attempts.insert(0, (f"+{raw}", None))

    for text, region in attempts:
        try:
            parsed = pn.parse(text, region)
        except pn.NumberParseException:
            continue
        if pn.is_valid_number(parsed):
            return pn.format_number(parsed, pn.PhoneNumberFormat.E164)[1:]
    raise ValueError(f"Not a valid phone number: {number!r}")


def is_valid_phone(number: str, default_region: str = "US") -> bool:
    """Like :func:`normalize_phone`, but answers instead of raising.

    Without phonenumbers installed this is always False.
    """
    try:
        normalize_phone(number, default_region)
    except (ImportError, ValueError):
        return False
    return True
