"""Tests for the high-risk keyword gate."""

import pytest

from homefix.plugins.safety_gate import HIGH_RISK_CATEGORIES, SafetyGatePlugin

ALL_KEYWORDS = [keyword for _, keywords in HIGH_RISK_CATEGORIES for keyword in keywords]


@pytest.fixture
def gate():
    return SafetyGatePlugin()


@pytest.mark.parametrize("keyword", ALL_KEYWORDS)
@pytest.mark.parametrize("template", [
    "I think there is a {} problem here",
    "{}!!",
    "Worried about the ({}) near the heater.",
])
def test_every_keyword_triggers_in_any_casing(gate, keyword, template):
    for variant in (keyword, keyword.upper(), keyword.title()):
        result = gate.check(template.format(variant))

        assert result.triggered
        assert result.force_hire
        assert result.reason.startswith("Detected high-risk category: ")


def test_first_declared_category_wins(gate):
    result = gate.check("Shingles blew off the roof and now I smell gas in the attic")

    assert result.category == "GAS"
    assert result.reason == "Detected high-risk category: gas"


def test_keyword_order_within_category(gate):
    result = gate.check("there is a foundation crack by the door")

    assert result.category == "STRUCTURAL"
    assert result.reason == "Detected high-risk category: foundation"


def test_punctuation_adjacency(gate):
    assert gate.check("GAS-smell in the kitchen").triggered
    assert gate.check("moldy corner;asbestos?").triggered


def test_safe_text_does_not_trigger(gate):
    result = gate.check("The kitchen faucet drips when the handle is off")

    assert not result.triggered
    assert result.reason is None
    assert not result.force_hire


def test_empty_text(gate):
    assert not gate.check("").triggered
    assert not gate.check(None).triggered


def test_kernel_function_returns_dict(gate):
    assert gate.check_safety("propane tank leak") == {
        "triggered": True,
        "reason": "Detected high-risk category: propane",
        "force_hire": True,
    }
