import logging
import sys

import click

from payment_fields.fields.cleaning import clean_value
from payment_fields.fields.references import (
    InvalidCharacterError,
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


logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Validate, clean and create Swiss QR bill fields."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("text")
def clean(text: str) -> None:
    """Replace characters not supported in QR bills."""
    result = clean_value(text)
    click.echo(result.cleaned_value or "")
    if result.replaced_unsupported_chars:
        click.echo("Unsupported characters have been replaced.", err=True)


@main.command("check-iban")
@click.argument("value")
def check_iban(value: str) -> None:
    """Check an IBAN (spaces are ignored)."""
    iban = remove_whitespace(value)
    if not is_valid_iban(iban):
        click.echo(f"Invalid IBAN: {value}")
        sys.exit(1)
    kind = "QR-IBAN" if is_qr_iban(iban) else "IBAN"
    click.echo(f"Valid {kind}: {format_iban(iban.upper())}")


@main.command("check-reference")
@click.argument("value")
def check_reference(value: str) -> None:
    """Check a QR reference or creditor reference (spaces are ignored)."""
    reference = remove_whitespace(value)
    if is_valid_qr_reference(reference):
        click.echo(f"Valid QR reference: {format_qr_reference(reference)}")
    elif is_valid_creditor_reference(reference):
        click.echo(f"Valid creditor reference: {format_iban(reference.upper())}")
    else:
        click.echo(f"Invalid reference: {value}")
        sys.exit(1)


@main.command("create-reference")
@click.argument("raw_reference")
def create_reference(raw_reference: str) -> None:
    """Create a creditor reference (RF...) from letters and digits."""
    try:
        reference = create_creditor_reference(raw_reference)
    except InvalidCharacterError as e:
        raise click.BadParameter(str(e), param_hint="RAW_REFERENCE") from e
    if not is_valid_creditor_reference(reference):
        raise click.BadParameter(
            "The reference is too long for a creditor reference.",
            param_hint="RAW_REFERENCE",
        )
    logger.debug(f"Created creditor reference {reference}")
    click.echo(format_iban(reference))


@main.command("create-qr-reference")
@click.argument("raw_reference")
def create_qr_reference_command(raw_reference: str) -> None:
    """Create a QR reference from up to 26 digits."""
    try:
        reference = create_qr_reference(raw_reference)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="RAW_REFERENCE") from e
    logger.debug(f"Created QR reference {reference}")
    click.echo(format_qr_reference(reference))


@main.command("format")
@click.argument("value")
def format_command(value: str) -> None:
    """Format an IBAN or reference for display."""
    value = remove_whitespace(value)
    if is_valid_qr_reference(value):
        click.echo(format_qr_reference(value))
    else:
        click.echo(format_iban(value))


if __name__ == "__main__":
    main()
