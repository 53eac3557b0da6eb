import logging
import unicodedata

import pytest

from payment_fields.fields.cleaning import (
    EXCLUDED_LATIN1,
    CleaningResult,
    clean_value,
    clean_values,
    is_valid_character,
)


# --- Character classification ---


def test_printable_ascii_is_valid_except_caret():
    """All printable ASCII characters but the caret belong to the character set."""
    for cp in range(0x20, 0x7F):
        assert is_valid_character(chr(cp)) == (cp != 0x5E)


def test_control_characters_are_invalid():
    for cp in range(0x00, 0x20):
        assert not is_valid_character(chr(cp))
    assert not is_valid_character("\x7f")


def test_latin1_allow_list():
    assert is_valid_character("£")  # pound sign
    assert is_valid_character("´")  # acute accent
    assert not is_valid_character("\u00a0")
    assert not is_valid_character("¿")
    assert not is_valid_character("þ")
    assert not is_valid_character("ÿ")
    for cp in range(0xC0, 0xFE):
        assert is_valid_character(chr(cp)) == (cp not in EXCLUDED_LATIN1)


def test_characters_beyond_latin1_are_invalid():
    assert not is_valid_character("Ā")
    assert not is_valid_character("€")
    assert not is_valid_character("\U0001f600")


# --- Empty and whitespace input ---


@pytest.mark.parametrize(
    "value", [None, "", " ", "   ", "\t\n", "   \r\n", "\u00a0\u2003"]
)
def test_empty_or_whitespace_only_returns_none(value):
    """Whitespace-only input is not reported as modified."""
    assert clean_value(value) == CleaningResult(None, False)


# --- Basic cleaning ---


def test_valid_value_is_only_trimmed():
    result = clean_value("  Hans Muster  ")
    assert result.cleaned_value == "Hans Muster"
    assert result.replaced_unsupported_chars is False


def test_valid_spaces_are_kept():
    assert clean_value("A   B") == CleaningResult("A   B", False)


def test_caret_is_replaced_in_name():
    result = clean_value("Café^ Müller")
    assert result.cleaned_value == "Café. Müller"
    assert result.replaced_unsupported_chars is True
    assert result.was_modified is True


def test_pound_sign_and_acute_accent_are_preserved():
    result = clean_value("£ 100 ´")
    assert result == CleaningResult("£ 100 ´", False)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("ÃO", ".O"),
        ("Ærø", ".r."),
        ("Smørrebrød", "Sm.rrebr.d"),
        ("Łódź", ".ód."),
        ("a\x00b", "a.b"),
        ("a\x07b", "a.b"),
        ("10 €", "10 ."),
    ],
)
def test_unsupported_characters_are_replaced_by_dot(value, expected):
    result = clean_value(value)
    assert result.cleaned_value == expected
    assert result.replaced_unsupported_chars is True


# --- Whitespace collapsing ---


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("A\tB", "A B"),
        ("A\t\tB", "A B"),
        ("A\r\nB", "A B"),
        ("a\u0085b", "a b"),
        ("a\u2028\u2003b", "a b"),
        # a valid space suppresses following invalid whitespace
        ("A \tB", "A B"),
        ("A \u00a0B", "A B"),
        # a valid space after invalid whitespace is copied as is
        ("A\t B", "A  B"),
        ("A \t B", "A  B"),
        ("A\t.\tB", "A . B"),
    ],
)
def test_invalid_whitespace_collapses(value, expected):
    result = clean_value(value)
    assert result.cleaned_value == expected
    assert result.replaced_unsupported_chars is True


def test_trimming_after_whitespace_replacement():
    """Replaced whitespace at the edges is trimmed but still counts as replacement."""
    result = clean_value("\tHello\n")
    assert result == CleaningResult("Hello", True)


# --- Normalization ---


def test_decomposed_letters_are_composed():
    """Base letter plus combining accent becomes a valid precomposed letter."""
    value = "Cafe\u0301 Mu\u0308ller"
    assert not unicodedata.is_normalized("NFC", value)
    result = clean_value(value)
    assert result == CleaningResult("Café Müller", False)


def test_decomposed_letter_composing_to_excluded_letter():
    # A + ring above composes to U+00C5, which is not supported
    result = clean_value("A\u030ar")
    assert result == CleaningResult(".r", True)


def test_normalization_and_replacement_combined():
    result = clean_value("e\u0301^")
    assert result == CleaningResult("é.", True)


def test_combining_mark_without_precomposed_form_is_replaced():
    result = clean_value("q\u0301")
    assert result == CleaningResult("q.", True)


def test_normalization_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="payment_fields.fields.cleaning"):
        clean_value("Zu\u0308rich")
    assert "normalizing" in caplog.text


def test_normalization_happens_once(mocker):
    normalize = mocker.spy(unicodedata, "normalize")
    result = clean_value("Zu\u0308rich €")
    assert result == CleaningResult("Zürich .", True)
    assert normalize.call_count == 1


def test_normalized_value_is_not_normalized_again(mocker):
    normalize = mocker.spy(unicodedata, "normalize")
    result = clean_value("Zürich €")
    assert result == CleaningResult("Zürich .", True)
    normalize.assert_not_called()


# --- Supplementary characters and surrogates ---


def test_supplementary_character_becomes_single_dot():
    result = clean_value("Hi \U0001f600!")
    assert result == CleaningResult("Hi .!", True)


def test_surrogate_pair_becomes_single_dot():
    result = clean_value("Hi \ud83d\ude00!")
    assert result == CleaningResult("Hi .!", True)


def test_unpaired_surrogates_are_replaced_individually():
    assert clean_value("a\ud83dz") == CleaningResult("a.z", True)
    assert clean_value("a\ude00z") == CleaningResult("a.z", True)
    assert clean_value("\ude00\ud83d") == CleaningResult("..", True)


def test_supplementary_combining_spacing_mark_is_dropped():
    # U+1D165 MUSICAL SYMBOL COMBINING STEM has category Mc
    assert unicodedata.category("\U0001d165") == "Mc"
    assert clean_value("x\U0001d165y") == CleaningResult("xy", True)
    assert clean_value("x\ud834\udd65y") == CleaningResult("xy", True)


def test_only_dropped_characters_returns_none():
    assert clean_value("\U0001d165") == CleaningResult(None, True)


def test_supplementary_character_resets_space_flag():
    assert clean_value("a \U0001f600\tb") == CleaningResult("a . b", True)


# --- Properties ---


@pytest.mark.parametrize(
    "value",
    [
        "Café^ Müller",
        "Hi \U0001f600",
        "x\t\ty",
        "Cafe\u0301",
        "   Rue de l'Église 1\n",
        "Ærø \U0001f600 \u0301",
        "\t^\t",
    ],
)
def test_cleaning_is_idempotent(value):
    first = clean_value(value)
    second = clean_value(first.cleaned_value)
    assert second.cleaned_value == first.cleaned_value
    assert second.replaced_unsupported_chars is False


@pytest.mark.parametrize(
    "value",
    [
        "Hans Muster",
        " Zürich ",
        "Cafe\u0301",
        "A^B",
        "Ærø",
        "x\ty",
        "x  y",
    ],
)
def test_flag_matches_difference_to_normalized_input(value):
    result = clean_value(value)
    expected = unicodedata.normalize("NFC", value).strip(" ")
    assert result.replaced_unsupported_chars == (result.cleaned_value != expected)


# --- Several fields ---


def test_clean_values_reports_replaced_fields(caplog):
    values = {
        "name": "Müller^",
        "street": "Bahnhofstrasse",
        "city": "  ",
        "country": None,
        "info": "Rechnung\t2023",
    }
    with caplog.at_level(logging.INFO, logger="payment_fields.fields.cleaning"):
        cleaned, replaced = clean_values(values)

    assert cleaned == {
        "name": "Müller.",
        "street": "Bahnhofstrasse",
        "city": None,
        "country": None,
        "info": "Rechnung 2023",
    }
    assert replaced == ["name", "info"]
    assert "field name" in caplog.text
