"""Prompt templates for the funding evaluation.

Templates are plain data. Which one is used, and which incentive programs the
model is told to leave out, is decided by configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Sequence, Tuple


@dataclass(frozen=True)
class PromptTemplate:
    name: str
    instructions: str
    excluded_programs: Tuple[str, ...] = field(default_factory=tuple)

    def with_exclusions(self, programs: Sequence[str]) -> "PromptTemplate":
        return replace(self, excluded_programs=tuple(p for p in programs if p))

    def render_instructions(self) -> str:
        if not self.excluded_programs:
            return self.instructions
        lines = [f"- Do not mention {program}." for program in self.excluded_programs]
        return self.instructions + "\n\nExcluded programs:\n" + "\n".join(lines)


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str


SUMMARY_TEMPLATE = PromptTemplate(
    name="summary",
    instructions=(
        "You are a highly paid, expert-level clean energy funding consultant with access to real-time "
        "web search results. Your role is to assess a single EV charging project site and provide a clear, "
        "accurate, and thorough one-page summary of all potential funding opportunities available to that "
        "project.\n\n"
        "Use the provided project input and internet findings to identify likely support under:\n\n"
        "- Federal Funding\n"
        "- State Funding\n"
        "- Utility Incentives\n"
        "- Local/Regional Programs\n"
        "- Private/Other Incentives\n\n"
        "Do not name programs. Describe eligibility types using conservative ranges, note required missing "
        "info (e.g. DAC status), and end with a short disclaimer. Keep the language professional and "
        "executive-ready."
    ),
)

DETAILED_TEMPLATE = PromptTemplate(
    name="detailed",
    instructions=(
        "You are an expert clean energy funding consultant. Evaluate the EV charging project described "
        "above and list every funding program it is likely eligible for, using the internet findings as "
        "supporting evidence.\n\n"
        "Organize the answer under these headings, in this order:\n"
        "1. Federal Funding\n"
        "2. State Funding\n"
        "3. Utility Incentives\n"
        "4. Local/Regional Programs\n"
        "5. Private/Other Incentives\n\n"
        "For each program give: the program name, the administering agency or utility, the eligibility "
        "basis for this site, and an estimated dollar amount.\n\n"
        "Calculation rules:\n"
        "- Compute per-port or per-charger incentives from the charger and port counts given above.\n"
        "- Respect published per-site and per-port caps; when a cap is unknown, say so.\n"
        "- Apply disadvantaged community (DAC) adders only when the site is stated to be in a DAC.\n"
        "- State whether programs can be stacked; do not add together programs that are mutually "
        "exclusive.\n"
        "- End with an estimated total range (low to high).\n\n"
        "Formatting: use Markdown headings and bullet lists, keep each program to at most four bullets, "
        "and do not include a preamble.\n\n"
        "Citations: cite the source URL for every program taken from the internet findings. Do not invent "
        "programs, amounts, or URLs; if the evidence is insufficient, say what information is missing. "
        "Close with a one-sentence disclaimer that amounts are estimates."
    ),
)

TEMPLATES: Dict[str, PromptTemplate] = {
    template.name: template for template in (SUMMARY_TEMPLATE, DETAILED_TEMPLATE)
}


def get_template(name: str, excluded_programs: Sequence[str] = ()) -> PromptTemplate:
    try:
        template = TEMPLATES[name]
    except KeyError:
        raise ValueError(f"Unsupported prompt template: {name}") from None
    return template.with_exclusions(excluded_programs)


def assemble_prompt(description: str, evidence_text: str, template: PromptTemplate) -> Prompt:
    user = f"Customer Project Details:\n{description}\n\nRelevant Internet Findings:\n{evidence_text}"
    return Prompt(system=template.render_instructions(), user=user)
