"""Configuration for MoneyFlow.

Paths, the selectable year range, time zone, locale and advisory settings.
Values come from environment variables (optionally via a ``.env`` file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()


@dataclass(frozen=True)
class Locale:
    """Fixed locale: month names, currency layout and advisory strings."""

    month_names: Tuple[str, ...]
    currency_symbol: str
    decimal_sep: str
    thousands_sep: str
    language: str
    advice_fallback: str
    advice_empty_fallback: str


PT_BR = Locale(
    month_names=(
        "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
        "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
    ),
    currency_symbol="R$",
    decimal_sep=",",
    thousands_sep=".",
    language="Brazilian Portuguese",
    advice_fallback="Mantenha o foco nos seus objetivos financeiros!",
    advice_empty_fallback="Continue acompanhando seus gastos para manter a saúde financeira!",
)


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _PROJECT_ROOT / "data"
    tz: ZoneInfo = field(default_factory=lambda: ZoneInfo("America/Sao_Paulo"))
    first_year: int = 2026
    year_count: int = 5
    locale: Locale = PT_BR
    log_level: str = "INFO"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    advice_timeout: float = 20.0


def load_settings() -> Settings:
    """Build Settings from the environment."""
    return Settings(
        data_dir=Path(os.getenv("MONEYFLOW_DATA_DIR", _PROJECT_ROOT / "data")).resolve(),
        tz=ZoneInfo(os.getenv("MONEYFLOW_TZ", "America/Sao_Paulo")),
        first_year=int(os.getenv("MONEYFLOW_FIRST_YEAR", "2026")),
        year_count=int(os.getenv("MONEYFLOW_YEAR_COUNT", "5")),
        log_level=os.getenv("MONEYFLOW_LOG_LEVEL", "INFO").upper(),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("MONEYFLOW_GEMINI_MODEL", "gemini-2.0-flash"),
        advice_timeout=float(os.getenv("MONEYFLOW_ADVICE_TIMEOUT", "20")),
    )


def ensure_data_directory(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
