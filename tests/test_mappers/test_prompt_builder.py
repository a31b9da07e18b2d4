from leadhunter.mappers.prompt_builder import build_search_prompt
from leadhunter.schemas.coaching import ServiceContext
from leadhunter.schemas.lead import BusinessSize, SearchFilters, WebsiteRule


def _build(**overrides):
    kwargs = dict(
        query="padaria in São Paulo contact phone number",
        niche="padaria",
        location="São Paulo",
        size=BusinessSize.small,
        request_count=8,
        excluded_names=[],
        filters=SearchFilters(),
    )
    kwargs.update(overrides)
    return build_search_prompt(**kwargs)


def test_prompt_contains_target_and_count():
    prompt = _build()
    assert '"padaria"' in prompt
    assert '"São Paulo"' in prompt
    assert "FIND 8 POTENTIAL LEADS" in prompt
    assert "padaria in São Paulo contact phone number" in prompt
    assert "Small = Local/Freelancer" in prompt


def test_prompt_lists_excluded_names():
    prompt = _build(excluded_names=["Padaria A", "Padaria B"])
    assert "EXCLUDE these existing names: Padaria A, Padaria B." in prompt


def test_prompt_without_exclusions_has_no_exclude_line():
    assert "EXCLUDE" not in _build()


def test_prompt_filters_and_instruction():
    prompt = _build(
        filters=SearchFilters(website_rule=WebsiteRule.must_not_have, mobile_only=True),
        custom_instruction="  only family-owned  ",
    )
    assert "WITHOUT a website" in prompt
    assert "MOBILE/WhatsApp" in prompt
    assert "EXTRA INSTRUCTION FROM THE USER: only family-owned" in prompt


def test_prompt_hunter_mode_uses_service_context():
    prompt = _build(service=ServiceContext(service_name="Sites", description="Sites em 7 dias"))
    assert 'THE USER SELLS: "Sites"' in prompt
    assert "HIGH QUALITY FILTERING" in prompt
    assert "HIGH QUALITY FILTERING" not in _build()
