import uuid

from leadhunter.mappers.phone import PhoneRegion, is_not_found, normalize_phone
from leadhunter.schemas.lead import Lead, LeadScore, LeadStatus, QualityTier

UNKNOWN_NAME = "Desconhecido"
PHONE_NOT_FOUND = "Não encontrado"
DEFAULT_DESCRIPTION = "Sem descrição disponível."
DEFAULT_MATCH_REASON = "Oportunidade de modernização digital."


def derive_score(website: str | None, instagram: str | None) -> LeadScore:
    """Lead temperature from web presence.

    No website is the hottest opportunity; a website plus Instagram means
    the business is investing but may need optimization.
    """
    if not website:
        return LeadScore.hot
    if instagram:
        return LeadScore.warm
    return LeadScore.cold


def _clean_text(value: object) -> str | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _clean_link(value: object) -> str | None:
    text = _clean_text(value)
    if text is None or is_not_found(text):
        return None
    return text


def _parse_pain_points(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [text for item in value if (text := _clean_text(item))]


def _parse_quality_tier(value: object) -> QualityTier:
    text = _clean_text(value)
    if text is None:
        return QualityTier.opportunity
    key = "-".join(text.lower().replace("_", " ").split())
    try:
        return QualityTier(key)
    except ValueError:
        return QualityTier.opportunity


def sanitize_lead(raw: object, region: PhoneRegion | None = None) -> Lead:
    """Map one loosely-typed provider record to a Lead. Never raises.

    Score is always derived locally; a provider-supplied score is ignored.
    """
    item = raw if isinstance(raw, dict) else {}

    phone = _clean_text(item.get("phone")) or PHONE_NOT_FOUND
    website = _clean_link(item.get("website"))
    instagram = _clean_link(item.get("instagram"))

    return Lead(
        id=uuid.uuid4().hex,
        name=_clean_text(item.get("name")) or UNKNOWN_NAME,
        phone=phone,
        normalized_phone=normalize_phone(phone, region),
        instagram=instagram,
        website=website,
        description=_clean_text(item.get("description")) or DEFAULT_DESCRIPTION,
        pain_points=_parse_pain_points(item.get("painPoints", item.get("pain_points"))),
        match_reason=_clean_text(item.get("matchReason", item.get("match_reason"))) or DEFAULT_MATCH_REASON,
        quality_tier=_parse_quality_tier(item.get("qualityTier", item.get("quality_tier"))),
        score=derive_score(website, instagram),
        status=LeadStatus.new,
    )
