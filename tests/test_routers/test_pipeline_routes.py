import csv
import io
import json
from urllib.parse import parse_qs, urlparse

import respx
from httpx import Response

from leadhunter.services.gemini import generate_url

GEMINI_URL = generate_url("gemini-2.5-flash")


def _lead_json(lead_id: str, name: str, phone: str = "(11) 98765-4321", **extra) -> dict:
    return {
        "id": lead_id,
        "name": name,
        "phone": phone,
        "normalized_phone": "".join(ch for ch in phone if ch.isdigit()) or None,
        "instagram": "@" + lead_id,
        "website": None,
        "description": f"{name}, negócio local",
        "pain_points": ["Sem site"],
        "match_reason": "Sem presença digital",
        "score": "warm",
        **extra,
    }


def _gemini_text(text: str) -> Response:
    return Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


async def _seed(client):
    resp = await client.post("/pipeline", json={"leads": [
        _lead_json("l1", "Padaria A"),
        _lead_json("l2", "Padaria B", phone="Não encontrado"),
    ]})
    assert resp.status_code == 201
    return resp.json()


async def test_save_and_list(client):
    saved = await _seed(client)
    assert [lead["status"] for lead in saved] == ["new", "new"]

    resp = await client.get("/pipeline")
    assert [lead["id"] for lead in resp.json()] == ["l1", "l2"]

    # saving the same id again keeps the original
    await client.post("/pipeline", json={"leads": [_lead_json("l1", "Renamed")]})
    resp = await client.get("/pipeline/l1")
    assert resp.json()["name"] == "Padaria A"


async def test_status_changes_and_filter(client):
    await _seed(client)

    resp = await client.patch("/pipeline/l2/status", json={"status": "negotiation"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "negotiation"

    resp = await client.post("/pipeline/l1/advance")
    assert resp.json()["status"] == "contacted"

    resp = await client.get("/pipeline", params={"status": "negotiation"})
    assert [lead["id"] for lead in resp.json()] == ["l2"]

    resp = await client.patch("/pipeline/l1/status", json={"status": "lost"})
    assert resp.status_code == 422


async def test_summary(client):
    await _seed(client)
    await client.patch("/pipeline/l1/status", json={"status": "closed"})

    resp = await client.get("/pipeline/summary", params={"ticket_value": 2000})

    data = resp.json()
    assert data["saved"] == 2
    assert data["valid_phones"] == 1
    assert data["by_status"]["closed"] == 1
    assert data["potential_revenue"] == 4000


async def test_export_csv(client):
    await _seed(client)

    resp = await client.get("/pipeline/export.csv")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "leads_export.csv" in resp.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[0] == ["Nome", "Telefone", "Instagram", "Site", "Descrição"]
    assert rows[1][0] == "Padaria A"
    assert len(rows) == 3


async def test_remove_and_clear(client):
    await _seed(client)

    resp = await client.delete("/pipeline/l1")
    assert resp.status_code == 204
    resp = await client.get("/pipeline/l1")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Lead l1 not found"

    resp = await client.delete("/pipeline")
    assert resp.json() == {"removed": 1}


async def test_unknown_lead_404(client):
    resp = await client.post("/pipeline/ghost/advance")
    assert resp.status_code == 404


async def test_message_with_given_text_builds_whatsapp_link(client):
    await _seed(client)

    resp = await client.post("/pipeline/l1/message", json={"message": "Oi, tudo bem?"})

    data = resp.json()
    assert data["message"] == "Oi, tudo bem?"
    url = urlparse(data["whatsapp_url"])
    assert url.netloc == "web.whatsapp.com"
    params = parse_qs(url.query)
    assert params["phone"] == ["5511987654321"]
    assert params["text"] == ["Oi, tudo bem?"]


async def test_message_without_phone_has_no_link(client):
    await _seed(client)

    resp = await client.post("/pipeline/l2/message", json={"message": "Oi", "desktop": True})

    assert resp.json()["whatsapp_url"] is None


@respx.mock
async def test_message_generated_by_provider(client):
    await _seed(client)
    respx.post(GEMINI_URL).mock(return_value=_gemini_text("Fala Padaria A, bora ter site?"))

    resp = await client.post("/pipeline/l1/message", json={
        "service_context": {"service_name": "Sites", "description": "Sites rápidos"},
        "desktop": True,
    })

    data = resp.json()
    assert data["message"] == "Fala Padaria A, bora ter site?"
    assert data["whatsapp_url"].startswith("whatsapp://send?phone=5511987654321")


@respx.mock
async def test_audit_is_attached(client):
    await _seed(client)
    route = respx.post(GEMINI_URL).mock(return_value=_gemini_text("1. ❌ A\n2. ❌ B\n3. ❌ C"))

    resp = await client.post("/pipeline/l1/audit", json={"service_name": "Sites"})

    assert resp.status_code == 200
    assert resp.json()["audit"].startswith("1. ❌ A")
    prompt = json.loads(route.calls.last.request.content)["contents"][0]["parts"][0]["text"]
    assert "Padaria A" in prompt
    resp = await client.get("/pipeline/l1")
    assert resp.json()["audit"].startswith("1. ❌ A")


@respx.mock
async def test_bulk_messages_skip_invalid_phones_and_fall_back_per_lead(client):
    await _seed(client)
    await client.post("/pipeline", json={"leads": [_lead_json("l3", "Padaria C", phone="(11) 91234-5678")]})
    route = respx.post(GEMINI_URL)
    route.side_effect = [
        _gemini_text("Fala Padaria A, bora ter site?"),
        Response(503, text="overloaded"),
    ]

    resp = await client.post("/pipeline/messages", json={
        "service_context": {"service_name": "Sites", "description": "Sites rápidos"},
    })

    assert resp.status_code == 200
    data = resp.json()
    assert [m["lead_id"] for m in data] == ["l1", "l3"]
    assert data[0]["message"] == "Fala Padaria A, bora ter site?"
    assert data[1]["message"].startswith("Fala Padaria C")
    assert parse_qs(urlparse(data[1]["whatsapp_url"]).query)["phone"] == ["5511912345678"]
    assert route.call_count == 2


async def test_bulk_messages_filter_by_status(client):
    await _seed(client)
    await client.post("/pipeline/l1/advance")

    resp = await client.post("/pipeline/messages", json={"status": "new"})
    assert resp.json() == []

    resp = await client.post("/pipeline/messages", json={"status": "contacted", "desktop": True})
    data = resp.json()
    assert [m["lead_id"] for m in data] == ["l1"]
    assert data[0]["message"].startswith("Olá Padaria A")
    assert data[0]["whatsapp_url"].startswith("whatsapp://send")


@respx.mock
async def test_bulk_messages_bad_key_returns_503(client):
    await _seed(client)
    respx.post(GEMINI_URL).mock(return_value=Response(401, text="unauthorized"))

    resp = await client.post("/pipeline/messages", json={"service_context": {"service_name": "Sites"}})

    assert resp.status_code == 503
