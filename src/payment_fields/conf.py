from typing import Any, Dict, List

from django.conf import settings as django_settings


DEFAULTS: Dict[str, Any] = {
    # Countries whose IBANs can be used as QR bill account
    "PAYMENT_FIELDS_IBAN_COUNTRIES": ["CH", "LI"],
}


def get_setting(name: str) -> Any:
    """Returns a setting from the Django settings, falling back to DEFAULTS.

    Raises:
        KeyError: If the setting has no default.
    """
    return getattr(django_settings, name, DEFAULTS[name])


def allowed_iban_countries() -> List[str]:
    return [country.upper() for country in get_setting("PAYMENT_FIELDS_IBAN_COUNTRIES")]
