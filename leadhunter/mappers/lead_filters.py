import logging
import unicodedata

from leadhunter.mappers.phone import PhoneRegion, is_mobile
from leadhunter.schemas.lead import Lead, SearchFilters, WebsiteRule

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Deduplication key for a business name."""
    return " ".join(unicodedata.normalize("NFKC", name).casefold().split())


def matches_filters(
    lead: Lead,
    filters: SearchFilters,
    region: PhoneRegion | None = None,
) -> bool:
    if filters.website_rule == WebsiteRule.must_have and not lead.website:
        return False
    if filters.website_rule == WebsiteRule.must_not_have and lead.website:
        return False
    if filters.instagram_required and not lead.instagram:
        return False
    if filters.mobile_only and lead.normalized_phone:
        mobile = is_mobile(lead.normalized_phone, region)
        # Without a region the rule is only enforced through the prompt
        if mobile is False:
            return False
    return True
