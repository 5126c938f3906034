from __future__ import annotations

from typing import List

from .address import parse_city, parse_state, state_name
from .models import ProjectForm

DAC_SENTENCES = {
    "yes": "The site is located in a designated disadvantaged community (DAC).",
    "no": "The site is not located in a designated disadvantaged community (DAC).",
}


def _fmt_number(value: float | int) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _plural(count: int, word: str) -> str:
    return word if count == 1 else f"{word}s"


def _charger_sentence(form: ProjectForm) -> str:
    if form.num_chargers is None:
        return ""
    label = f"{form.charger_type} " if form.charger_type else ""
    sentence = f"It includes {form.num_chargers} {label}{_plural(form.num_chargers, 'charger')}"
    if form.charger_kw is not None:
        sentence += f" rated at {_fmt_number(form.charger_kw)} kW each"
    return sentence + "."


def _port_sentence(form: ProjectForm) -> str:
    if form.num_ports is None:
        return ""
    sentence = f"The chargers provide {form.num_ports} charging {_plural(form.num_ports, 'port')}"
    if form.port_kw is not None:
        sentence += f" at {_fmt_number(form.port_kw)} kW per port"
    return sentence + "."


def describe_project(form: ProjectForm) -> str:
    """Render the submitted form as one deterministic paragraph for the prompt."""
    address = form.site_address or "an unspecified address"
    utility = form.utility_provider or "unknown"

    sentences: List[str] = [f"The proposed EV charging project is located at {address}."]

    city = parse_city(form.site_address)
    state = parse_state(form.site_address)
    if state:
        where = f"{city}, {state_name(state)}" if city else state_name(state)
        sentences.append(f"The site is in {where}.")

    sentences.append(f"The electric utility serving the site is {utility}.")

    for sentence in (_charger_sentence(form), _port_sentence(form)):
        if sentence:
            sentences.append(sentence)

    if form.charger_type and form.num_chargers is None:
        sentences.append(f"The planned charger type is {form.charger_type}.")

    sentences.append(
        f"The intended usage type is {form.usage_type or 'unknown'} "
        f"and public access is {form.public_access or 'unknown'}."
    )
    if form.vehicle_type:
        sentences.append(f"The site will primarily serve {form.vehicle_type} vehicles.")

    dac = DAC_SENTENCES.get((form.disadvantaged_community or "").lower())
    if dac:
        sentences.append(dac)

    return " ".join(sentences)
