from urllib.parse import quote, urlencode

from leadhunter.mappers.phone import PhoneRegion, normalize_phone

WEB_SEND_URL = "https://web.whatsapp.com/send"
DESKTOP_SEND_URL = "whatsapp://send"


def whatsapp_link(
    phone: str,
    message: str,
    region: PhoneRegion | None = None,
    desktop: bool = False,
) -> str | None:
    """Deep link that opens a chat with ``message`` prefilled, or None for a bad phone."""
    number = normalize_phone(phone, region)
    if number is None:
        return None
    base = DESKTOP_SEND_URL if desktop else WEB_SEND_URL
    query = urlencode({"phone": number, "text": message}, quote_via=quote)
    return f"{base}?{query}"
