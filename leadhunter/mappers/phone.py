import re
from dataclasses import dataclass

MIN_PHONE_DIGITS = 8

# Provider replies use these (any case) to mean "no value".
NOT_FOUND_SENTINELS = frozenset({
    "", "-", "n/a", "na", "none", "null", "nil", "unknown",
    "not found", "not available", "no phone", "no website", "no site",
    "não encontrado", "nao encontrado", "não disponível", "nao disponivel",
    "sem telefone", "sem site", "sem instagram", "desconhecido",
    "no encontrado", "no disponible", "sin teléfono", "sin telefono", "sin sitio",
})

_NON_DIGIT_RE = re.compile(r"\D")


@dataclass(frozen=True)
class PhoneRegion:
    country_code: str
    local_lengths: tuple[int, ...]
    mobile_pattern: str  # matched against the national number


REGIONS: dict[str, PhoneRegion] = {
    # DDD (2 digits) + 8-digit landline or 9-digit mobile starting with 9
    "BR": PhoneRegion(country_code="55", local_lengths=(10, 11), mobile_pattern=r"^\d{2}9\d{8}$"),
}


def get_region(code: str | None) -> PhoneRegion | None:
    if not code:
        return None
    try:
        return REGIONS[code.strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown phone region: {code!r}") from None


def is_not_found(value: object) -> bool:
    """True when ``value`` is one of the provider's "intentionally absent" markers."""
    if value is None:
        return True
    if not isinstance(value, str):
        return False
    return " ".join(value.split()).casefold() in NOT_FOUND_SENTINELS


def normalize_phone(raw: object, region: PhoneRegion | None = None) -> str | None:
    """Reduce a free-text phone to its digits, or None when it is unusable.

    Unusable means: not a string, a "not found" sentinel, fewer than
    MIN_PHONE_DIGITS digits, or a single repeated digit ("00000000").
    When ``region`` is given, local-length numbers get its country code.
    """
    if not isinstance(raw, str) or is_not_found(raw):
        return None
    digits = _NON_DIGIT_RE.sub("", raw)
    if len(digits) < MIN_PHONE_DIGITS:
        return None
    if len(set(digits)) == 1:
        return None
    if region and len(digits) in region.local_lengths:
        digits = region.country_code + digits
    return digits


def is_mobile(digits: str, region: PhoneRegion | None) -> bool | None:
    """Whether ``digits`` is a mobile number in ``region``; None if unknowable."""
    if region is None:
        return None
    national = digits
    if digits.startswith(region.country_code) and len(digits) - len(region.country_code) in region.local_lengths:
        national = digits[len(region.country_code):]
    return re.match(region.mobile_pattern, national) is not None
