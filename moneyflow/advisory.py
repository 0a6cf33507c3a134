"""Spending tips from Google Gemini.

The advisor always resolves to a string: any failure (missing key, network,
auth, timeout, empty or malformed response) turns into the locale's fallback
message.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any, Iterable, Optional

from google import genai

from moneyflow.aggregation import top_groups
from moneyflow.config import Locale, PT_BR, Settings
from moneyflow.domain import ConsolidatedGroup
from moneyflow.formatting import format_currency

logger = logging.getLogger(__name__)

TOP_GROUPS = 5


def should_request_advice(budget: Decimal, spent: Decimal) -> bool:
    return not (budget == 0 and spent == 0)


def build_prompt(
    budget: Decimal,
    spent: Decimal,
    groups: Iterable[ConsolidatedGroup],
    locale: Locale = PT_BR,
) -> str:
    lines = [
        f"- {g.description}: {format_currency(g.total, locale)}"
        for g in top_groups(groups, TOP_GROUPS)
    ]
    context = "\n".join([
        f"Total budget: {format_currency(budget, locale)}",
        f"Total spent: {format_currency(spent, locale)}",
        f"Remaining: {format_currency(budget - spent, locale)}",
        f"Top {TOP_GROUPS} consolidated expenses:",
        *lines,
    ])
    return (
        "Briefly analyse this monthly spending summary and give one short, practical "
        "tip (at most 2 sentences) to save or manage the money better. "
        f"Be friendly and direct, and answer in {locale.language}.\n"
        f"Context:\n{context}"
    )


class GeminiAdvisor:

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-2.0-flash",
        timeout: float = 20.0,
        locale: Locale = PT_BR,
        client: Any = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.locale = locale
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiAdvisor":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.advice_timeout,
            locale=settings.locale,
        )

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise ValueError("GEMINI_API_KEY is not set.")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def advise(
        self, budget: Decimal, spent: Decimal, groups: Iterable[ConsolidatedGroup]
    ) -> str:
        prompt = build_prompt(budget, spent, groups, self.locale)
        logger.info("Requesting advice from %s", self.model)
        try:
            client = self._get_client()
            response = await asyncio.wait_for(
                client.aio.models.generate_content(model=self.model, contents=prompt),
                timeout=self.timeout,
            )
            text = (response.text or "").strip()
        except Exception as e:
            logger.error("Advice request failed: %s", e)
            return self.locale.advice_fallback

        if not text:
            logger.info("Advice response was empty")
            return self.locale.advice_empty_fallback
        return text
