import pytest


@pytest.fixture(scope="session")
def valid_ibans():
    """Provides IBANs with correct check digits."""
    return [
        "CH9300762011623852957",
        "CH801503791J674321901",
        "IT60X0542811101000000123456",
        "LI21088100002324013AA",
        "DE89370400440532013000",
    ]


@pytest.fixture(scope="session")
def qr_iban():
    """Provides a Swiss QR-IBAN (institution id 31999)."""
    return "CH4431999123000889012"


@pytest.fixture(scope="session")
def valid_qr_reference():
    """Provides a valid 27 digit QR reference."""
    return "210000000003139471430009017"


@pytest.fixture(scope="session")
def valid_creditor_reference():
    """Provides a valid ISO 11649 creditor reference."""
    return "RF18539007547034"
