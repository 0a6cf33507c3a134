import asyncio
from decimal import Decimal
from types import SimpleNamespace

import pytest

from moneyflow.advisory import GeminiAdvisor, build_prompt, should_request_advice
from moneyflow.config import PT_BR
from moneyflow.domain import ConsolidatedGroup


class FakeModels:
    def __init__(self, text=None, error=None, delay=0):
        self.text = text
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate_content(self, model, contents):
        self.calls.append({"model": model, "contents": contents})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def make_client(models):
    return SimpleNamespace(aio=SimpleNamespace(models=models))


def make_groups(n):
    return [ConsolidatedGroup(f"Item{i}", Decimal(100 - i), 1) for i in range(n)]


def test_should_request_advice():
    assert not should_request_advice(Decimal("0"), Decimal("0"))
    assert should_request_advice(Decimal("0"), Decimal("10"))
    assert should_request_advice(Decimal("10"), Decimal("0"))


def test_build_prompt_contains_summary_and_top_five():
    prompt = build_prompt(Decimal("1000.00"), Decimal("850.00"), make_groups(7), PT_BR)
    assert "R$ 1.000,00" in prompt
    assert "R$ 850,00" in prompt
    assert "R$ 150,00" in prompt
    assert "Item4" in prompt
    assert "Item5" not in prompt
    assert "2 sentences" in prompt
    assert PT_BR.language in prompt


@pytest.mark.asyncio
async def test_advise_returns_model_text():
    models = FakeModels(text="  Corte gastos com Uber.  ")
    advisor = GeminiAdvisor(model="test-model", client=make_client(models))
    advice = await advisor.advise(Decimal("1000"), Decimal("850"), make_groups(2))
    assert advice == "Corte gastos com Uber."
    assert models.calls[0]["model"] == "test-model"
    assert "Item0" in models.calls[0]["contents"]


@pytest.mark.asyncio
async def test_advise_empty_text_uses_keep_tracking_fallback():
    advisor = GeminiAdvisor(client=make_client(FakeModels(text=None)))
    assert await advisor.advise(Decimal("1"), Decimal("1"), []) == PT_BR.advice_empty_fallback


@pytest.mark.asyncio
async def test_advise_failure_uses_fallback():
    advisor = GeminiAdvisor(client=make_client(FakeModels(error=ConnectionError("down"))))
    assert await advisor.advise(Decimal("1"), Decimal("1"), []) == PT_BR.advice_fallback


@pytest.mark.asyncio
async def test_advise_timeout_uses_fallback():
    advisor = GeminiAdvisor(timeout=0.01, client=make_client(FakeModels(text="late", delay=1)))
    assert await advisor.advise(Decimal("1"), Decimal("1"), []) == PT_BR.advice_fallback


@pytest.mark.asyncio
async def test_advise_without_api_key_uses_fallback():
    advisor = GeminiAdvisor(api_key=None)
    assert await advisor.advise(Decimal("1"), Decimal("1"), []) == PT_BR.advice_fallback
