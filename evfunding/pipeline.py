from __future__ import annotations

import logging
import time
from typing import Optional

from .config import Settings
from .describe import describe_project
from .llm import LLMClient
from .models import EvaluationOutcome, ProjectForm
from .prompts import assemble_prompt, get_template
from .queries import build_queries, get_strategy
from .web import NO_EVIDENCE, WebScraper, WebSearchClient, merge_links


logger = logging.getLogger(__name__)


class EvaluationPipeline:
    def __init__(
        self,
        settings: Settings,
        search_client: Optional[WebSearchClient] = None,
        scraper: Optional[WebScraper] = None,
        llm: Optional[LLMClient] = None,
    ):
        self.settings = settings
        self.strategy = get_strategy(settings.search_strategy)
        self.template = get_template(settings.prompt_template, settings.excluded_programs)
        self.search_client = search_client or WebSearchClient(settings)
        self.scraper = scraper or WebScraper(settings)
        self.llm = llm or LLMClient(settings)

    async def run(self, form: ProjectForm) -> EvaluationOutcome:
        start_time = time.perf_counter()
        description = describe_project(form)
        queries = build_queries(form, self.strategy)

        searches = await self.search_client.search(queries)
        urls = merge_links(searches, self.settings.max_search_urls)
        failed_searches = sum(1 for outcome in searches if not outcome.ok)

        if urls:
            evidence = await self.scraper.fetch_bulk(urls)
            evidence_text, used, failed = evidence.text, evidence.used, evidence.failed
        else:
            evidence_text, used, failed = NO_EVIDENCE, 0, 0

        prompt = assemble_prompt(description, evidence_text, self.template)
        result = await self.llm.complete(prompt)

        outcome = EvaluationOutcome(
            result=result,
            queries=queries,
            urls=urls,
            failed_searches=failed_searches,
            sources_used=used,
            sources_failed=failed,
            latency=round(time.perf_counter() - start_time, 2),
        )
        logger.info("Evaluation finished: %s", outcome.stats())
        return outcome
