from .fields.cleaning import CleaningResult, clean_value, clean_values, is_valid_character
from .fields.references import (
    InvalidCharacterError,
    calculate_mod10,
    calculate_mod97,
    create_creditor_reference,
    create_qr_reference,
    format_iban,
    format_qr_reference,
    is_qr_iban,
    is_valid_creditor_reference,
    is_valid_iban,
    is_valid_qr_reference,
    remove_whitespace,
)

__all__ = [
    "CleaningResult",
    "InvalidCharacterError",
    "calculate_mod10",
    "calculate_mod97",
    "clean_value",
    "clean_values",
    "create_creditor_reference",
    "create_qr_reference",
    "format_iban",
    "format_qr_reference",
    "is_qr_iban",
    "is_valid_character",
    "is_valid_creditor_reference",
    "is_valid_iban",
    "is_valid_qr_reference",
    "remove_whitespace",
]
