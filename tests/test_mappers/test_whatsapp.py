from leadhunter.mappers.phone import REGIONS
from leadhunter.mappers.whatsapp import whatsapp_link


def test_web_link_with_region():
    url = whatsapp_link("(11) 98765-4321", "Opa, tudo bem?", region=REGIONS["BR"])
    assert url == "https://web.whatsapp.com/send?phone=5511987654321&text=Opa%2C%20tudo%20bem%3F"


def test_desktop_link_without_region():
    url = whatsapp_link("11 98765-4321", "oi", desktop=True)
    assert url == "whatsapp://send?phone=11987654321&text=oi"


def test_invalid_phone_yields_none():
    assert whatsapp_link("Não encontrado", "oi") is None
    assert whatsapp_link("123", "oi") is None
