import logging
import random
import re

from leadhunter.exceptions.custom import ProviderAuthError, ProviderError
from leadhunter.mappers.json_extract import extract_json_array, extract_json_object
from leadhunter.schemas.coaching import (
    ObjectionResponse,
    RoleplayMessage,
    RoleplayProfile,
    SequenceStep,
    ServiceContext,
    ServiceInsights,
)
from leadhunter.schemas.lead import Lead
from leadhunter.services.provider import TextProvider

logger = logging.getLogger(__name__)

COPY_STRATEGIES = (
    "THE 'MYSTERY SHOPPER' (Pretend you tried to use their service but hit a snag)",
    "THE 'LOST REVENUE' (Aggressively point out money they are losing)",
    "THE 'COMPETITOR ENVY' (Mention their competitor is doing something better)",
    "THE 'PATTERN INTERRUPT' (Start with a weird, hyper-specific question)",
    "THE 'EGO BAIT' (Compliment them heavily, then pivot to the one missing piece)",
)

ROLEPLAY_PERSONAS = {
    RoleplayProfile.skeptic: "O Cético: acha que é golpe, pede provas, responde frio e desconfiado.",
    RoleplayProfile.cheap: "O Pão-Duro: só importa o preço, sempre pede desconto e compara com concorrentes baratos.",
    RoleplayProfile.hasty: "O Apressado: grosso, respostas curtíssimas, só quer saber 'qual o preço?'.",
}

OPENING_TURN = RoleplayMessage(
    sender="ai",
    text="Oi. Quem é e o que você quer? (Seja breve, tô ocupado)",
    feedback=(
        "O cliente iniciou a conversa com uma barreira defensiva. "
        "Tente quebrar o padrão ou gerar curiosidade imediata."
    ),
    score=5,
)

FALLBACK_AUDIT = (
    "1. ❌ Site não encontrado ou lento.\n"
    "2. ❌ Perfil do Google desatualizado.\n"
    "3. ❌ Ausência de funil de vendas."
)

FALLBACK_INSIGHTS = ServiceInsights(
    recommended_niche="Negócios Locais",
    suggested_ticket=1500,
    reasoning="Todos os negócios precisam de presença digital.",
    potential="Alta demanda em todas as cidades.",
)


def _fallback_copy(lead: Lead) -> str:
    return (
        f"Fala {lead.name}, vi aqui que vocês estão deixando dinheiro na mesa "
        "sem um site profissional. Bora resolver isso hoje?"
    )


def _fallback_sequence(service: ServiceContext) -> list[SequenceStep]:
    offer = service.service_name or "nosso serviço"
    return [
        SequenceStep(
            day="Dia 1",
            trigger="Curiosidade",
            message=f"Opa! Vi uma coisa no perfil de vocês que tem a ver com {offer}. Posso te mostrar?",
            explanation="Abre um loop de curiosidade sem vender nada.",
        ),
        SequenceStep(
            day="Dia 3",
            trigger="Prova Social",
            message="Ajudei um negócio parecido com o seu a dobrar os contatos no mês passado. Quer ver como?",
            explanation="Mostra resultado concreto em alguém parecido.",
        ),
        SequenceStep(
            day="Dia 7",
            trigger="Escassez",
            message="Vou fechar a agenda deste mês amanhã. Ainda quer conversar?",
            explanation="Cria urgência real para tirar o lead da inércia.",
        ),
    ]


def _fallback_objection(objection: str) -> ObjectionResponse:
    return ObjectionResponse(
        objection=objection,
        responses=[
            "Entendo totalmente. O que faria isso valer a pena para você?",
            "Faz sentido. Posso te mostrar em 2 minutos quanto isso está custando hoje?",
        ],
        tip="Valide a objeção antes de responder e devolva com uma pergunta.",
    )


def _service_block(service: ServiceContext) -> str:
    lines = [f"- Service: {service.service_name}", f"- Offer: {service.description}"]
    if service.target_audience:
        lines.append(f"- Target audience: {service.target_audience}")
    if service.ticket_value:
        lines.append(f"- Ticket: R$ {service.ticket_value:,.2f}")
    return "\n".join(lines)


def _pain_points_line(lead: Lead) -> str:
    if lead.pain_points:
        return f"Specific Problems Detected: {', '.join(lead.pain_points)}"
    return "Problem: General lack of digital optimization."


def _clamp_score(value: object) -> int | None:
    try:
        return max(0, min(10, int(value)))
    except (TypeError, ValueError):
        return None


_AMOUNT_RE = re.compile(r"\d[\d.,]*")


def _parse_ticket(value: object) -> float | None:
    """Read a BRL amount the model may send as 2500, "2500", "R$ 2.500" or "2.500,00"."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str) or not (match := _AMOUNT_RE.search(value)):
        return None

    amount = match.group(0).rstrip(".,")
    last_dot, last_comma = amount.rfind("."), amount.rfind(",")
    if last_dot != -1 and last_comma != -1:
        decimal = "." if last_dot > last_comma else ","
        thousands = "," if decimal == "." else "."
        amount = amount.replace(thousands, "").replace(decimal, ".")
    elif last_dot != -1 or last_comma != -1:
        sep = "." if last_dot != -1 else ","
        # a 3-digit tail or repeated separator is thousands grouping
        if len(amount.rpartition(sep)[2]) == 3 or amount.count(sep) > 1:
            amount = amount.replace(sep, "")
        else:
            amount = amount.replace(sep, ".")
    try:
        return float(amount)
    except ValueError:
        return None


class SalesCoachService:
    """LLM-prompted sales tools.

    Every tool degrades to a canned answer when the provider fails
    transiently. Credential errors are not swallowed.
    """

    def __init__(self, provider: TextProvider, rng: random.Random | None = None):
        self._provider = provider
        self._rng = rng or random.Random()

    async def _ask(self, prompt: str, **kwargs) -> str | None:
        try:
            generation = await self._provider.generate(prompt, **kwargs)
        except ProviderAuthError:
            raise
        except ProviderError as exc:
            logger.warning("Coaching call failed: %s", exc)
            return None
        return generation.text.strip()

    async def marketing_copy(self, lead: Lead, service: ServiceContext) -> str:
        if not service.service_name:
            return (
                f"Olá {lead.name}, tudo bem? Vi seu perfil e achei interessante o trabalho de vocês. "
                "Gostaria de conversar sobre uma oportunidade de parceria."
            )

        strategy = self._rng.choice(COPY_STRATEGIES)
        prompt = (
            'You are a world-class Direct Response Copywriter known for "Cold DMs" that get replies.\n'
            f"YOUR STRATEGY FOR THIS MESSAGE: {strategy}\n\n"
            "The Client (Receiver):\n"
            f"- Name: {lead.name}\n"
            f'- Details: "{lead.description}"\n'
            f"- {_pain_points_line(lead)}\n"
            f"- Match Reason: {lead.match_reason or 'N/A'}\n\n"
            "My Service (Sender):\n"
            f"{_service_block(service)}\n\n"
            "Rules for the message:\n"
            '1. Language: Portuguese (Brazil). Informal but sharp ("Opa", "Fala [Nome]").\n'
            '2. NO "Assunto:". Just the body text.\n'
            "3. SHORT. Mobile optimized. Max 3-4 sentences.\n"
            "4. Focus on the PAIN POINTS detected.\n"
            '5. If they have "No Website", use that as the main hook.\n\n'
            "Output ONLY the message text."
        )
        text = await self._ask(prompt, temperature=1.5)
        return text or _fallback_copy(lead)

    async def lead_audit(self, lead: Lead, service: ServiceContext) -> str:
        pain_context = f"Known Issues: {', '.join(lead.pain_points)}" if lead.pain_points else ""
        prompt = (
            f"ACT AS AN EXPERT AUDITOR FOR: {service.service_name or 'Digital Marketing'}.\n"
            f"TARGET: {lead.name} ({lead.description}).\n"
            f"{pain_context}\n\n"
            'TASK: Create a mini "Technical Audit" finding 3 SPECIFIC PROBLEMS with their '
            "digital presence that justify buying the user's service.\n\n"
            "FORMAT:\n1. ❌ [Problem 1]\n2. ❌ [Problem 2]\n3. ❌ [Problem 3]\n\n"
            "Language: Portuguese (Brazil). Professional, authoritative, concise."
        )
        text = await self._ask(prompt)
        return text or FALLBACK_AUDIT

    async def service_insights(self, service_name: str, description: str) -> ServiceInsights:
        prompt = (
            "Act as a World-Class Business Strategist & Sales Consultant.\n\n"
            "The User sells the following service:\n"
            f'Name: "{service_name}"\n'
            f'Description: "{description}"\n\n'
            "1. Identify the ONE best niche industry to target.\n"
            "2. Estimate a recommended HIGH-TICKET price in BRL (R$) that niche can afford.\n"
            "3. Explain WHY this niche is the perfect fit (the pain point).\n"
            "4. Describe the financial potential.\n\n"
            "Output format: JSON ONLY.\n"
            '{"recommendedNiche": "Industry Name", "suggestedTicket": 2500, '
            '"reasoning": "...", "potential": "..."}'
        )
        data = extract_json_object(await self._ask(prompt, json_output=True))
        niche = (data.get("recommendedNiche") or data.get("recommended_niche")) if data else None
        if not niche:
            logger.warning("Service insights reply has no niche, using fallback: %s", data)
            return FALLBACK_INSIGHTS

        ticket = _parse_ticket(data.get("suggestedTicket", data.get("suggested_ticket")))
        if ticket is None:
            logger.warning("Unreadable suggested ticket %r, using default", data.get("suggestedTicket"))
            ticket = FALLBACK_INSIGHTS.suggested_ticket
        return ServiceInsights(
            recommended_niche=str(niche),
            suggested_ticket=ticket,
            reasoning=str(data.get("reasoning") or ""),
            potential=str(data.get("potential") or ""),
        )

    async def follow_up_sequence(self, service: ServiceContext) -> list[SequenceStep]:
        prompt = (
            "You are a sales cadence expert. 80% of sales happen after the 5th touch.\n"
            "Create a psychological follow-up sequence to revive leads that went silent.\n\n"
            f"{_service_block(service)}\n\n"
            "Return 5 steps as a JSON array. Each step: "
            '{"day": "Dia 1", "trigger": "mental trigger used", '
            '"message": "WhatsApp message in Portuguese (Brazil)", '
            '"explanation": "why it works"}'
        )
        steps: list[SequenceStep] = []
        for item in extract_json_array(await self._ask(prompt, json_output=True)):
            if not isinstance(item, dict) or not item.get("message"):
                continue
            steps.append(SequenceStep(
                day=str(item.get("day") or f"Dia {len(steps) + 1}"),
                trigger=str(item.get("trigger") or ""),
                message=str(item["message"]),
                explanation=str(item.get("explanation") or ""),
            ))
        return steps or _fallback_sequence(service)

    @staticmethod
    def opening_turn() -> RoleplayMessage:
        return OPENING_TURN.model_copy()

    async def roleplay_turn(
        self,
        profile: RoleplayProfile,
        history: list[RoleplayMessage],
        service: ServiceContext,
    ) -> RoleplayMessage:
        transcript = "\n".join(
            f"{'VENDEDOR' if m.sender == 'user' else 'CLIENTE'}: {m.text}" for m in history
        )
        prompt = (
            "You are playing a PROSPECT in a sales roleplay dojo. Stay in character.\n"
            f"Persona: {ROLEPLAY_PERSONAS[profile]}\n\n"
            "The seller offers:\n"
            f"{_service_block(service)}\n\n"
            f"Conversation so far:\n{transcript}\n\n"
            "Reply as the prospect (Portuguese, Brazil) and coach the seller on their LAST message.\n"
            'Return JSON: {"reply": "prospect answer", "feedback": "coaching tip", '
            '"score": 0-10 rating of the seller\'s last message}'
        )
        data = extract_json_object(await self._ask(prompt, json_output=True))
        if not data or not data.get("reply"):
            return RoleplayMessage(
                sender="ai",
                text="Hmm... não entendi. Pode repetir?",
                feedback="Não foi possível avaliar esta mensagem. Tente novamente.",
            )
        return RoleplayMessage(
            sender="ai",
            text=str(data["reply"]),
            feedback=str(data.get("feedback") or "") or None,
            score=_clamp_score(data.get("score")),
        )

    async def handle_objection(
        self,
        objection: str,
        service: ServiceContext,
        lead: Lead | None = None,
    ) -> ObjectionResponse:
        lead_context = f"The prospect is {lead.name} ({lead.description}).\n" if lead else ""
        prompt = (
            "You are an elite sales closer. Handle this objection.\n"
            f"{lead_context}"
            f"{_service_block(service)}\n\n"
            f'OBJECTION: "{objection}"\n\n'
            "Give 3 short replies in Portuguese (Brazil), each with a different angle.\n"
            'Return JSON: {"responses": ["...", "...", "..."], "tip": "one-line coaching tip"}'
        )
        data = extract_json_object(await self._ask(prompt, json_output=True))
        responses = data.get("responses") if data else None
        if not isinstance(responses, list) or not responses:
            return _fallback_objection(objection)
        return ObjectionResponse(
            objection=objection,
            responses=[str(r) for r in responses if r],
            tip=str(data.get("tip") or ""),
        )
