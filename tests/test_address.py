import pytest

from evfunding.address import STATE_NAMES, parse_city, parse_state, state_name


@pytest.mark.parametrize("code", sorted(STATE_NAMES))
def test_state_code_follows_comma_and_precedes_zip(code):
    assert parse_state(f"1 Depot Rd, Anytown, {code} 12345") == code


@pytest.mark.parametrize(
    "address,expected",
    [
        ("123 Main St, Springfield, IL 62704", "IL"),
        ("500 Grand Ave, Oakland, CA 94610-1234", "CA"),
        ("9 Elm St, Boston, MA 02108, USA", "MA"),
    ],
)
def test_parse_state(address, expected):
    assert parse_state(address) == expected


@pytest.mark.parametrize(
    "address",
    ["", "123 Main St Springfield IL", "Springfield, Illinois 62704", "123 Main St, Springfield, IL", None, 42],
)
def test_parse_state_missing_pattern_returns_empty(address):
    assert parse_state(address) == ""


def test_parse_city():
    assert parse_city("123 Main St, Springfield, IL 62704") == "Springfield"
    assert parse_city("Suite 4, 77 Harbor Way, San Diego, CA 92101") == "San Diego"
    assert parse_city("Springfield IL 62704") == ""
    assert parse_city(None) == ""


def test_state_name_lookup_falls_back_to_input():
    assert state_name("IL") == "Illinois"
    assert state_name("dc") == "District of Columbia"
    assert state_name("ZZ") == "ZZ"
    assert state_name("") == ""
