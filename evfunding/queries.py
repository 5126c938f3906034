"""Search query strategies.

A strategy is a named tuple of templates. Placeholders that resolve to an
empty value are dropped, so a sparse form still yields usable queries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .address import parse_state, state_name
from .models import ProjectForm


@dataclass(frozen=True)
class QueryStrategy:
    name: str
    templates: Tuple[str, ...]


ADDRESS_STRATEGY = QueryStrategy(
    name="address",
    templates=(
        "EV charger funding incentives {address} {utility}",
        "EV charging site rebates {address} {utility}",
        "EVSE make-ready incentives {utility} site:.gov",
        "EV charging tax credits {address}",
        "EV infrastructure funding programs {utility}",
    ),
)

STATE_STRATEGY = QueryStrategy(
    name="state",
    templates=(
        "{usage} {charger_type} EV charger funding incentives {state}",
        "{utility} EV charger rebates {charger_type}",
        "{state} EVSE make-ready program {utility} site:.gov",
        "{state} EV charging grants {usage}",
        "EV charging tax credits {state}",
        "{utility} EV fleet charging incentives {state}",
    ),
)

STRATEGIES: Dict[str, QueryStrategy] = {
    strategy.name: strategy for strategy in (ADDRESS_STRATEGY, STATE_STRATEGY)
}


def get_strategy(name: str) -> QueryStrategy:
    try:
        return STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unsupported search strategy: {name}") from None


def _components(form: ProjectForm) -> Dict[str, str]:
    state = parse_state(form.site_address)
    return {
        "address": form.site_address or "",
        "utility": form.utility_provider or "",
        "charger_type": form.charger_type or "",
        "usage": form.usage_type or "",
        "state": state_name(state) if state else "",
    }


def build_queries(form: ProjectForm, strategy: QueryStrategy = ADDRESS_STRATEGY) -> List[str]:
    components = _components(form)
    queries: List[str] = []
    for template in strategy.templates:
        query = " ".join(template.format(**components).split())
        if query and query not in queries:
            queries.append(query)
    return queries
