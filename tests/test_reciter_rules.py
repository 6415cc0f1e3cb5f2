import string

import pytest

from mbitsim.reciter_rules import all_letter_rules, rules_for
from mbitsim.reciter_tables import Rule, parse_rule


def test_every_letter_has_rules():
    rules = all_letter_rules()
    assert list(rules) == list(string.ascii_uppercase)
    assert all(len(group) > 0 for group in rules.values())


@pytest.mark.parametrize("letter", list(string.ascii_uppercase))
def test_match_starts_with_its_letter(letter):
    for rule in rules_for(letter):
        assert rule.match.startswith(letter)


@pytest.mark.parametrize("letter", list(string.ascii_uppercase))
def test_last_rule_is_plain_fallback(letter):
    last = rules_for(letter)[-1]
    assert last.prefix == ""
    assert last.suffix == ""
    assert last.match == letter


@pytest.mark.parametrize("letter", list(string.ascii_uppercase))
def test_rules_round_trip_through_text(letter):
    for rule in rules_for(letter):
        assert parse_rule(str(rule)) == rule


def test_silent_rule_has_empty_output():
    assert rules_for("H")[-1].output == ""


def test_commodore_rule_present():
    matches = [rule.match for rule in rules_for("C")]
    assert "COMMODORE" in matches


def test_lower_case_letter_accepted():
    assert rules_for("q") == rules_for("Q")


def test_all_letter_rules_agrees_with_rules_for():
    for letter, group in all_letter_rules().items():
        assert group == rules_for(letter)


@pytest.mark.parametrize("bad", ["1", "", "AB", "!", " "])
def test_non_letters_rejected(bad):
    with pytest.raises(ValueError):
        rules_for(bad)


def test_non_string_rejected():
    with pytest.raises(ValueError):
        rules_for(65)