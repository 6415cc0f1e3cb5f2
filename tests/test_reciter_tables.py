import pytest

from mbitsim.reciter_tables import (
    CharFlag,
    Rule,
    char_flags,
    parse_rule,
    punctuation_rules,
)

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def test_vowel_letter_flags():
    for vowel in "AEIOUY":
        flags = char_flags(vowel)
        assert CharFlag.LETTER in flags
        assert CharFlag.VOWEL in flags


def test_every_letter_is_vowel_or_consonant():
    for letter in LETTERS:
        flags = char_flags(letter)
        assert CharFlag.LETTER in flags
        assert (CharFlag.VOWEL in flags) != (CharFlag.CONSONANT in flags)


def test_voiced_consonants():
    for letter in "BDGJLMNRVWZ":
        assert CharFlag.VOICED in char_flags(letter)
    for letter in "PTKFS":
        assert CharFlag.VOICED not in char_flags(letter)


def test_sibilants():
    for letter in "CGJSXZ":
        assert CharFlag.SIBILANT in char_flags(letter)
    assert CharFlag.SIBILANT not in char_flags("B")


def test_digits_use_symbol_rules():
    for digit in "0123456789":
        assert char_flags(digit) == CharFlag.DIGIT | CharFlag.PUNCTUATION


def test_space_and_apostrophe():
    assert char_flags(" ") == CharFlag(0)
    assert CharFlag.LETTER in char_flags("'")
    assert CharFlag.PUNCTUATION in char_flags("'")


def test_characters_past_table_have_no_flags():
    assert char_flags("\u00e9") == CharFlag(0)


@pytest.mark.parametrize("bad", ["", "AB", 65])
def test_char_flags_rejects_non_characters(bad):
    with pytest.raises(ValueError):
        char_flags(bad)


def test_parse_rule_parts():
    rule = parse_rule(" (A.)=EH4Y. ")
    assert rule == Rule(prefix=" ", match="A.", suffix="", output="EH4Y. ")


def test_parse_rule_with_equals_in_match():
    rule = parse_rule("(=)= IY4KWULZ")
    assert rule.match == "="
    assert rule.output == " IY4KWULZ"


def test_parse_rule_empty_output():
    rule = parse_rule("#:(E) =")
    assert rule.prefix == "#:"
    assert rule.suffix == " "
    assert rule.output == ""


@pytest.mark.parametrize("text", ["A)=X", "(A=X", "(A)X", "()=X"])
def test_parse_rule_errors(text):
    with pytest.raises(ValueError):
        parse_rule(text)


def test_rule_text_round_trip():
    for rule in punctuation_rules():
        assert parse_rule(str(rule)) == rule


def test_symbol_rule_for_exclamation():
    rules = punctuation_rules()
    assert rules[1] == Rule(prefix="", match="!", suffix="", output=".")


def test_symbol_rules_cover_symbol_characters():
    leading = {rule.match[0] for rule in punctuation_rules()}
    outside = {c for c in leading if CharFlag.PUNCTUATION not in char_flags(c)}
    assert outside == {"A"}
    for digit in "0123456789":
        assert digit in leading


def test_specific_symbol_rule_outputs():
    by_text = {str(rule) for rule in punctuation_rules()}
    assert "(#)= NAH4MBER" in by_text
    assert " (64) =SIH4KSTIY FOHR" in by_text