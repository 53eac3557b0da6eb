import logging
import unicodedata
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple


logger = logging.getLogger(__name__)

# Latin-1 supplement letters that are not part of the QR bill character set
EXCLUDED_LATIN1: FrozenSet[int] = frozenset([
    0xC3, 0xC5, 0xC6, 0xD0, 0xD5, 0xD7, 0xD8, 0xDD, 0xDE,
    0xE3, 0xE5, 0xE6, 0xF0, 0xF5, 0xF8,
])

VALID_CODE_POINTS: FrozenSet[int] = frozenset(
    [cp for cp in range(0x20, 0x7F) if cp != 0x5E]
    + [0xA3, 0xB4]
    + [cp for cp in range(0xC0, 0xFE) if cp not in EXCLUDED_LATIN1]
)


@dataclass(frozen=True)
class CleaningResult:
    """Outcome of cleaning a single text value.

    Attributes:
        cleaned_value: The cleaned text, or None if nothing visible remains.
        replaced_unsupported_chars: True if at least one character had to be
            replaced or dropped. Normalization and trimming alone never set it.
    """

    cleaned_value: Optional[str]
    replaced_unsupported_chars: bool = False

    @property
    def was_modified(self) -> bool:
        return self.replaced_unsupported_chars


def is_valid_character(ch: str) -> bool:
    """Checks whether a single character belongs to the QR bill character set.

    The set comprises printable ASCII except the caret, the pound sign,
    the acute accent and most letters of the Latin-1 supplement.
    """
    return ord(ch) in VALID_CODE_POINTS


def _is_high_surrogate(ch: str) -> bool:
    return "\ud800" <= ch <= "\udbff"


def _is_low_surrogate(ch: str) -> bool:
    return "\udc00" <= ch <= "\udfff"


def _scan(value: str, is_normalized: bool) -> Optional[CleaningResult]:
    """Single cleaning pass over value.

    Returns None if the value turned out not to be NFC normalized and needs
    to be normalized and scanned again.
    """
    length = len(value)
    just_processed_space = False
    parts: Optional[List[str]] = None
    last_copied_pos = 0

    # Runs of valid characters are only copied once a replacement is needed
    pos = 0
    while pos < length:
        ch = value[pos]

        if is_valid_character(ch):
            just_processed_space = ch == " "
            pos += 1
            continue

        if ord(ch) > 0xFF and not is_normalized:
            is_normalized = unicodedata.is_normalized("NFC", value)
            if not is_normalized:
                return None

        if parts is None:
            parts = []
        if pos > last_copied_pos:
            parts.append(value[last_copied_pos:pos])

        code_point = ord(ch)
        width = 1
        if (
            _is_high_surrogate(ch)
            and pos + 1 < length
            and _is_low_surrogate(value[pos + 1])
        ):
            low = ord(value[pos + 1])
            code_point = 0x10000 + ((code_point - 0xD800) << 10) + (low - 0xDC00)
            width = 2

        if code_point > 0xFFFF:
            # one dot per scalar value, nothing for combining spacing marks
            if unicodedata.category(chr(code_point)) != "Mc":
                parts.append(".")
            just_processed_space = False
        elif ch.isspace():
            if not just_processed_space:
                parts.append(" ")
            just_processed_space = True
        else:
            parts.append(".")
            just_processed_space = False

        pos += width
        last_copied_pos = pos

    if parts is None:
        return CleaningResult(value.strip(" "), False)

    if last_copied_pos < length:
        parts.append(value[last_copied_pos:])
    return CleaningResult("".join(parts).strip(" "), True)


def clean_value(value: Optional[str]) -> CleaningResult:
    """Cleans a text value for use in a QR bill.

    Unsupported characters are replaced with a space (unsupported whitespace,
    consecutive ones collapsed into a single space) or with a dot (anything
    else). Leading and trailing spaces are removed.

    If a character beyond U+00FF is found, the value is first normalized to
    NFC so that letters written as base letter plus combining accent are
    merged into a single, possibly valid, code point. This happens at most
    once per value.

    Args:
        value: The text to clean. May be None.

    Returns:
        A CleaningResult. Its cleaned_value is None if the value is None,
        empty or consists of whitespace only.
    """
    if not value or value.isspace():
        return CleaningResult(None, False)

    result = _scan(value, False)
    if result is None:
        logger.debug("Value is not NFC normalized, normalizing before cleaning")
        value = unicodedata.normalize("NFC", value)
        result = _scan(value, True)

    if not result.cleaned_value:
        return CleaningResult(None, result.replaced_unsupported_chars)
    return result


def clean_values(
    values: Mapping[str, Optional[str]],
) -> Tuple[Dict[str, Optional[str]], List[str]]:
    """Cleans several named text fields at once.

    Args:
        values: Field names mapped to their raw text.

    Returns:
        A tuple of the cleaned values (same keys) and the names of the fields
        in which unsupported characters were replaced, in input order.
    """
    cleaned: Dict[str, Optional[str]] = {}
    replaced: List[str] = []
    for name, value in values.items():
        result = clean_value(value)
        cleaned[name] = result.cleaned_value
        if result.replaced_unsupported_chars:
            logger.info(f"Replaced unsupported characters in field {name}")
            replaced.append(name)
    return cleaned, replaced
