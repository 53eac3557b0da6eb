from typing import Optional

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _
from iso3166 import countries
import stdnum.iban
import stdnum.iso11649

from payment_fields.conf import allowed_iban_countries

from .cleaning import clean_value
from .references import (
    is_valid_creditor_reference,
    is_valid_iban,
    is_valid_qr_reference,
    remove_whitespace,
)


def validate_iban(value: str) -> None:
    """Validates an IBAN entered by a user.

    Spaces, dashes and dots are ignored, letters may be lower case.

    Raises:
        ValidationError: If the IBAN has an invalid structure or check digits,
            or if its country code is not an ISO 3166 code.
    """
    iban = stdnum.iban.compact(value)
    if not is_valid_iban(iban):
        raise ValidationError(
            _("%(value)s is not a valid IBAN."),
            code="invalid_iban",
            params={"value": value},
        )
    try:
        countries.get(iban[:2])
    except KeyError as e:
        raise ValidationError(
            _("The country code %(country)s is not a valid ISO3166 code."),
            code="invalid_country",
            params={"country": iban[:2]},
        ) from e


def validate_qr_bill_account(value: str) -> None:
    """Validates an IBAN that is to be used as account of a QR bill.

    In addition to validate_iban, the IBAN must belong to one of the countries
    configured in PAYMENT_FIELDS_IBAN_COUNTRIES.

    Raises:
        ValidationError: If the IBAN is invalid or from another country.
    """
    validate_iban(value)
    allowed = allowed_iban_countries()
    country = stdnum.iban.compact(value)[:2]
    if country not in allowed:
        raise ValidationError(
            _("IBAN must start with one of the allowed country codes: %(allowed)s"),
            code="country_not_allowed",
            params={"allowed": ", ".join(allowed)},
        )


def validate_creditor_reference(value: str) -> None:
    """Validates an ISO 11649 creditor reference, ignoring spaces.

    Raises:
        ValidationError: If the reference is invalid.
    """
    if not is_valid_creditor_reference(stdnum.iso11649.compact(value)):
        raise ValidationError(
            _("%(value)s is not a valid creditor reference."),
            code="invalid_creditor_reference",
            params={"value": value},
        )


def validate_qr_reference(value: str) -> None:
    """Validates a 27 digit QR reference, ignoring whitespace.

    Raises:
        ValidationError: If the reference is invalid.
    """
    if not is_valid_qr_reference(remove_whitespace(value)):
        raise ValidationError(
            _("%(value)s is not a valid QR reference."),
            code="invalid_qr_reference",
            params={"value": value},
        )


def validate_payment_text(value: Optional[str]) -> None:
    """Rejects text containing characters not supported by QR bills.

    The error message includes the cleaned text so it can be offered to the
    user as a replacement.

    Raises:
        ValidationError: If cleaning the text would replace characters.
    """
    result = clean_value(value)
    if result.replaced_unsupported_chars:
        raise ValidationError(
            _("Unsupported characters found; suggested replacement: %(cleaned)s"),
            code="unsupported_characters",
            params={"cleaned": result.cleaned_value or ""},
        )
