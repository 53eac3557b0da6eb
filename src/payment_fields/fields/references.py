from typing import List


# Maximum length of the payload of an ISO 11649 creditor reference
CREDITOR_REFERENCE_PAYLOAD_LENGTH = 21
QR_REFERENCE_LENGTH = 27
QR_IBAN_COUNTRIES = ("CH", "LI")
QR_IID_RANGE = range(30000, 32000)

MOD_10: List[int] = [0, 9, 4, 6, 8, 2, 7, 1, 3, 5]


class InvalidCharacterError(ValueError):
    """Raised when a reference contains a character outside the allowed set."""

    def __init__(self, character: str, position: int) -> None:
        self.character = character
        self.position = position
        super().__init__(
            f"Invalid character in reference: {character!r} at position {position}"
        )


def remove_whitespace(text: str) -> str:
    """Removes all whitespace, including whitespace inside the text."""
    return "".join(char for char in text if not char.isspace())


def is_numeric(value: str) -> bool:
    """Checks that value consists of ASCII digits only."""
    return all("0" <= char <= "9" for char in value)


def is_alphanumeric(value: str) -> bool:
    """Checks that value consists of ASCII digits and letters A-Z (either case) only."""
    return all(
        "0" <= char <= "9" or "A" <= char <= "Z" or "a" <= char <= "z"
        for char in value
    )


def _is_letter(char: str) -> bool:
    return "A" <= char <= "Z" or "a" <= char <= "z"


def cleanup_reference(text: str) -> str:
    """Converts text to uppercase and removes all non-alphanumeric characters.

    Used to derive a reference payload from free text such as an invoice
    number or a description.

    Args:
        text: The input string to clean up.

    Returns:
        A new string containing only uppercase ASCII letters and digits from the
        original input.
    """
    text = text.upper()
    return "".join(char for char in text if is_alphanumeric(char))


def calculate_mod97(reference: str) -> int:
    """Calculates the modulo 97 checksum of an IBAN or ISO 11649 reference.

    The first four characters are moved to the end, letters are converted to
    the numbers 10 to 35 (A=10, B=11, ...) and the resulting number is reduced
    modulo 97 (ISO 7064 MOD 97-10). The conversion happens on the fly, the
    intermediate value is kept below 10^9.

    Args:
        reference: A string of ASCII letters and digits, at least 4 characters
            long. Letters may be upper or lower case.

    Returns:
        The checksum (0 to 96). A reference with valid check digits yields 1.

    Raises:
        InvalidCharacterError: If the reference contains anything but ASCII
            letters and digits.
        ValueError: If the reference is shorter than 4 characters.
    """
    if len(reference) < 4:
        raise ValueError(
            f"Reference must have at least 4 characters, got {len(reference)}"
        )
    rearranged = reference[4:] + reference[:4]
    total = 0
    for index, char in enumerate(rearranged):
        if "0" <= char <= "9":
            total = total * 10 + (ord(char) - ord("0"))
        elif "A" <= char <= "Z":
            total = total * 100 + (ord(char) - ord("A") + 10)
        elif "a" <= char <= "z":
            total = total * 100 + (ord(char) - ord("a") + 10)
        else:
            # report the position within the original reference
            raise InvalidCharacterError(char, (index + 4) % len(reference))
        if total > 9999999:
            total = total % 97

    return total % 97


def _has_valid_mod97_check_digits(number: str) -> bool:
    try:
        return calculate_mod97(number) == 1
    except ValueError:
        return False


def is_valid_iban(iban: str) -> bool:
    """Validates an IBAN.

    All whitespace must have been removed beforehand. The IBAN is checked for
    valid characters, the country code and check digit positions, and the
    MOD 97 checksum. The country specific length is not checked.

    Args:
        iban: The IBAN without whitespace.

    Returns:
        True if the IBAN is valid, False otherwise.
    """
    if len(iban) < 5:
        return False
    if not is_alphanumeric(iban):
        return False
    if not (_is_letter(iban[0]) and _is_letter(iban[1])):
        return False
    if not (is_numeric(iban[2]) and is_numeric(iban[3])):
        return False
    return _has_valid_mod97_check_digits(iban)


def is_qr_iban(iban: str) -> bool:
    """Checks whether an IBAN is a QR-IBAN.

    A QR-IBAN is a Swiss or Liechtenstein IBAN whose institution id (the
    five digits following the check digits) lies between 30000 and 31999.
    Only QR-IBANs may be combined with a QR reference.
    """
    if not is_valid_iban(iban) or iban[:2].upper() not in QR_IBAN_COUNTRIES:
        return False
    iid = iban[4:9]
    return len(iid) == 5 and is_numeric(iid) and int(iid) in QR_IID_RANGE


def format_iban(iban: str) -> str:
    """Formats an IBAN or creditor reference by inserting spaces.

    Spaces are inserted to form groups of 4 characters. If a shorter group is
    needed, it appears at the end.

    Args:
        iban: IBAN or creditor reference without whitespace.

    Returns:
        The formatted string.
    """
    return " ".join(iban[pos:pos + 4] for pos in range(0, len(iban), 4))


def is_valid_creditor_reference(reference: str) -> bool:
    """Validates an ISO 11649 creditor reference ("RF" reference).

    All whitespace must have been removed beforehand. The reference is checked
    for valid characters, its length (5 to 25 characters) and the MOD 97
    check digits.

    Args:
        reference: The creditor reference without whitespace.

    Returns:
        True if the reference is valid, False otherwise.
    """
    if len(reference) < 5 or len(reference) > 25:
        return False
    if not is_alphanumeric(reference):
        return False
    if not (is_numeric(reference[2]) and is_numeric(reference[3])):
        return False
    return _has_valid_mod97_check_digits(reference)


def create_creditor_reference(raw_reference: str) -> str:
    """Creates an ISO 11649 creditor reference from a raw payload.

    Whitespace is removed from the payload, which is then prefixed with "RF"
    and the two MOD 97 check digits.

    Args:
        raw_reference: The payload, consisting of ASCII letters and digits.

    Returns:
        The creditor reference, e.g. "RF18539007547034".

    Raises:
        InvalidCharacterError: If the payload contains anything but ASCII
            letters and digits.
    """
    payload = remove_whitespace(raw_reference)
    modulo = calculate_mod97(f"RF00{payload}")
    return f"RF{98 - modulo:02d}{payload}"


def generate_invoice_reference(invoice_number: str) -> str:
    """Generates a creditor reference from an arbitrary invoice number.

    The invoice number is uppercased, stripped of everything that is not an
    ASCII letter or digit and truncated to the 21 characters a creditor
    reference can hold.

    Args:
        invoice_number: The base invoice number or identifier.

    Returns:
        A string formatted as "RFxx[cleaned_invoice_number]", where 'xx' are
        the two check digits.
    """
    payload = cleanup_reference(invoice_number)[:CREDITOR_REFERENCE_PAYLOAD_LENGTH]
    return create_creditor_reference(payload)


def _mod10_carry(digits: str) -> int:
    carry = 0
    for char in digits:
        carry = MOD_10[(carry + ord(char) - ord("0")) % 10]
    return carry


def is_valid_qr_reference(reference: str) -> bool:
    """Validates a QR reference number (formerly ISR reference number).

    All whitespace must have been removed beforehand. The reference must
    consist of exactly 27 digits, the last one being the check digit of the
    recursive MOD 10 algorithm.

    Args:
        reference: The QR reference without whitespace.

    Returns:
        True if the reference is valid, False otherwise.
    """
    if len(reference) != QR_REFERENCE_LENGTH or not is_numeric(reference):
        return False
    return _mod10_carry(reference) == 0


def calculate_mod10(digits: str) -> int:
    """Calculates the recursive MOD 10 check digit for a string of digits.

    Raises:
        InvalidCharacterError: If digits contains anything but ASCII digits.
    """
    for position, char in enumerate(digits):
        if not is_numeric(char):
            raise InvalidCharacterError(char, position)
    return (10 - _mod10_carry(digits)) % 10


def create_qr_reference(raw_reference: str) -> str:
    """Creates a QR reference from up to 26 digits.

    Whitespace is removed, the digits are left padded with zeros to 26 digits
    and the check digit is appended.

    Args:
        raw_reference: The reference digits without check digit.

    Returns:
        The 27 digit QR reference.

    Raises:
        InvalidCharacterError: If the reference contains anything but digits.
        ValueError: If the reference is empty or longer than 26 digits.
    """
    digits = remove_whitespace(raw_reference)
    if not digits or len(digits) > QR_REFERENCE_LENGTH - 1:
        raise ValueError(
            f"QR reference must have between 1 and {QR_REFERENCE_LENGTH - 1}"
            f" digits, got {len(digits)}"
        )
    # leading zeros do not change the check digit
    check_digit = calculate_mod10(digits)
    return f"{digits.rjust(QR_REFERENCE_LENGTH - 1, '0')}{check_digit}"


def format_qr_reference(reference: str) -> str:
    """Formats a QR reference number by inserting spaces.

    Spaces are inserted to create groups of 5 digits. If a shorter group is
    needed, it appears at the start.

    Args:
        reference: The QR reference without whitespace.

    Returns:
        The formatted reference, e.g. "21 00000 00003 13947 14300 09017".
    """
    groups: List[str] = []
    start = 0
    length = len(reference)
    while start < length:
        end = start + (length - start - 1) % 5 + 1
        groups.append(reference[start:end])
        start = end
    return " ".join(groups)
