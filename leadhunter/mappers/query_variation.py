# Rotated by attempt index so repeated provider calls don't return the same set.
QUERY_TEMPLATES = (
    "{niche} in {location} contact phone number",
    "{niche} {location} WhatsApp",
    "{niche} near {location} business directory listing",
    "best {niche} in {location} reviews",
    "{niche} {location} Instagram",
    "new {niche} opened recently in {location}",
)


def query_phrasing(index: int, niche: str, location: str) -> str:
    """Search phrasing for the ``index``-th provider call (0-based, round-robin)."""
    template = QUERY_TEMPLATES[index % len(QUERY_TEMPLATES)]
    return template.format(niche=niche.strip(), location=location.strip())
