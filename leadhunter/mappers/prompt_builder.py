from leadhunter.schemas.coaching import ServiceContext
from leadhunter.schemas.lead import BusinessSize, SearchFilters, WebsiteRule

_SIZE_HINTS = {
    BusinessSize.small: "Small = Local/Freelancer",
    BusinessSize.medium: "Medium = Established",
    BusinessSize.large: "Large = Market Leader",
}

_OUTPUT_EXAMPLE = """[
  {
    "name": "Business Name",
    "phone": "(XX) 9XXXX-XXXX",
    "instagram": "https://instagram.com/... or 'Not Found'",
    "website": "URL or 'Not Found'",
    "description": "Short description of the business.",
    "painPoints": ["No Website", "Low Google Rating"],
    "matchReason": "Ideal target because they have high foot traffic but zero digital presence.",
    "qualityTier": "opportunity | high-ticket | urgent"
  }
]"""


def _hunter_mode(service: ServiceContext | None) -> str:
    if service and service.service_name:
        return (
            ">>> HUNTER MODE ACTIVATED: HIGH QUALITY FILTERING <<<\n"
            f'THE USER SELLS: "{service.service_name}"\n'
            f'OFFER DESCRIPTION: "{service.description}"\n'
            "YOUR MISSION: Find businesses that have a SPECIFIC PAIN POINT that this service solves.\n"
            "- If the user sells SITES -> businesses with NO website, BROKEN or OLD websites.\n"
            "- If the user sells ADS/TRAFFIC -> low social engagement or invisible on Google.\n"
            "- If the user sells SOCIAL MEDIA -> inactive Instagram or bad photos.\n"
            'Do NOT list random businesses. List "Easy Wins" for this service provider.'
        )
    return (
        ">>> HUNTER MODE ACTIVATED <<<\n"
        "Find businesses that look like they need Digital Modernization "
        "(No website, old branding, low reviews)."
    )


def _filter_rules(filters: SearchFilters) -> list[str]:
    rules: list[str] = []
    if filters.website_rule == WebsiteRule.must_have:
        rules.append("ONLY include businesses that HAVE a working website.")
    elif filters.website_rule == WebsiteRule.must_not_have:
        rules.append("ONLY include businesses WITHOUT a website.")
    if filters.instagram_required:
        rules.append("ONLY include businesses with an Instagram profile.")
    if filters.mobile_only:
        rules.append("ONLY include MOBILE/WhatsApp numbers, no landlines.")
    return rules


def build_search_prompt(
    query: str,
    niche: str,
    location: str,
    size: BusinessSize,
    request_count: int,
    excluded_names: list[str],
    filters: SearchFilters,
    custom_instruction: str | None = None,
    service: ServiceContext | None = None,
) -> str:
    parts: list[str] = [
        "ACT AS AN ELITE SALES INTELLIGENCE BOT.",
        "",
        "TARGET:",
        f'- Niche: "{niche}"',
        f'- Location: "{location}"',
        f"- Size: {size.value} ({_SIZE_HINTS[size]})",
        f'- Search the web with a query like: "{query}"',
        "",
        _hunter_mode(service),
        "",
        "REQUIREMENTS:",
        f"1. FIND {request_count} POTENTIAL LEADS.",
        "2. STRICT TELEPHONE RULE: each lead MUST have a valid phone number "
        "(Mobile/WhatsApp preferred). If no phone, DO NOT include it.",
    ]
    if excluded_names:
        parts.append(f"3. EXCLUDE these existing names: {', '.join(excluded_names)}.")

    rules = _filter_rules(filters)
    if rules:
        parts.append("")
        parts.append("FILTERS:")
        parts.extend(f"- {rule}" for rule in rules)

    if custom_instruction and custom_instruction.strip():
        parts.append("")
        parts.append(f"EXTRA INSTRUCTION FROM THE USER: {custom_instruction.strip()}")

    parts.extend([
        "",
        "FOR EACH LEAD, IDENTIFY:",
        '- "painPoints": specific problems you detected (e.g. ["No Website", "Bad Reviews"]).',
        '- "matchReason": one persuasive sentence on why this lead will buy.',
        '- "qualityTier": "opportunity", "high-ticket" or "urgent".',
        "",
        "Output Format: STRICT JSON Array inside a code block.",
        _OUTPUT_EXAMPLE,
    ])
    return "\n".join(parts)
