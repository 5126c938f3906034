from __future__ import annotations

import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Runtime configuration loaded from environment variables."""

    openai_api_key: str | None = Field(default=None, repr=False)
    openai_model: str = "gpt-4"
    llm_api_style: str = "chat"  # options: chat, responses
    llm_temperature: float = 0.2
    llm_web_search: bool = False  # responses style only
    llm_timeout: float = 120.0

    serp_api_key: str | None = Field(default=None, repr=False)
    serp_endpoint: str = "https://serpapi.com/search.json"
    enable_search: bool = True
    search_strategy: str = "address"  # options: address, state
    results_per_query: int = 5
    max_search_urls: int = 7
    search_timeout: float = 15.0

    html_timeout: float = 8.0
    pdf_timeout: float = 10.0
    max_evidence_chars: int = 4000

    prompt_template: str = "summary"  # options: summary, detailed
    excluded_programs: List[str] = Field(default_factory=list)

    port: int = 3001
    log_level: str = "INFO"
    user_agent: str = "EVFundingEvaluator/0.1"

    class Config:
        extra = "ignore"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name) or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load .env + environment variables and return Settings singleton."""

    load_dotenv()
    env = {
        "openai_api_key": os.getenv("OPENAI_API_KEY"),
        "serp_api_key": os.getenv("SERP_API_KEY"),
        "openai_model": os.getenv("OPENAI_MODEL"),
        "llm_api_style": (os.getenv("LLM_API_STYLE") or "").lower() or None,
        "llm_temperature": os.getenv("LLM_TEMPERATURE"),
        "llm_timeout": os.getenv("LLM_TIMEOUT"),
        "search_strategy": (os.getenv("SEARCH_STRATEGY") or "").lower() or None,
        "results_per_query": os.getenv("RESULTS_PER_QUERY"),
        "max_search_urls": os.getenv("MAX_SEARCH_URLS"),
        "prompt_template": (os.getenv("PROMPT_TEMPLATE") or "").lower() or None,
        "port": os.getenv("PORT"),
        "log_level": (os.getenv("LOG_LEVEL") or "").upper() or None,
    }
    return Settings(
        **{key: value for key, value in env.items() if value},
        llm_web_search=_env_flag("LLM_WEB_SEARCH", False),
        enable_search=_env_flag("ENABLE_SEARCH", True),
        excluded_programs=_env_list("EXCLUDED_PROGRAMS"),
    )
