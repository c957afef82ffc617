"""
Burner validator CLI.

Usage:
    burner-validator --help                 Show all commands
    burner-validator check a@b.com          Quick check (syntax, blocklists, MX, DeBounce)
    burner-validator check a@b.com --deep   Add SMTP verification via Reacher
    burner-validator batch emails.txt       Validate one address per line
    burner-validator stats                  Blocklist sizes and health
    burner-validator add-domain foo.com     Add a domain to the discovered list
    burner-validator refresh                Re-fetch every blocklist now
"""

import asyncio
import json
from pathlib import Path

import typer

app = typer.Typer(
    name="burner-validator",
    help="Burner email validator - disposable address detection",
    no_args_is_help=True,
)


def _print_success(message: str) -> None:
    """Print a success message."""
    typer.echo(f"  ✅ {message}")


def _print_warning(message: str) -> None:
    """Print a warning message."""
    typer.echo(f"  ⚠️ {message}")


def _print_error(message: str) -> None:
    """Print an error message to stderr."""
    typer.echo(f"❌ {message}", err=True)


def _options(deep: bool, no_mx: bool, no_debounce: bool, timeout: float):
    from burner_validator.models import ValidationOptions

    return ValidationOptions(
        deep=deep,
        check_mx=not no_mx,
        use_debounce=not no_debounce,
        timeout=timeout,
    )


@app.command()
def check(
    email: str = typer.Argument(..., help="Address to validate"),
    deep: bool = typer.Option(False, "--deep", "-d", help="Verify the mailbox over SMTP"),
    no_mx: bool = typer.Option(False, "--no-mx", help="Skip the MX record check"),
    no_debounce: bool = typer.Option(False, "--no-debounce", help="Skip the DeBounce API"),
    timeout: float = typer.Option(5, "--timeout", "-t", help="Format/MX lookup timeout (s)"),
):
    """Validate a single email address."""
    from burner_validator.core.logging import setup_logging
    from burner_validator.errors import ConfigurationError
    from burner_validator.validator import get_validator

    setup_logging()
    options = _options(deep, no_mx, no_debounce, timeout)

    async def run():
        validator = get_validator()
        await validator.reputation.start()
        return await validator.validate(email, options)

    try:
        result = asyncio.run(run())
    except ConfigurationError as e:
        _print_error(str(e))
        raise typer.Exit(1) from e

    typer.echo(result.model_dump_json(indent=2))


@app.command()
def batch(
    file: Path = typer.Argument(..., exists=True, readable=True, help="One address per line"),
    deep: bool = typer.Option(False, "--deep", "-d", help="Verify mailboxes over SMTP"),
    no_mx: bool = typer.Option(False, "--no-mx", help="Skip the MX record check"),
    no_debounce: bool = typer.Option(False, "--no-debounce", help="Skip the DeBounce API"),
    concurrency: int = typer.Option(5, "--concurrency", "-c", min=1, help="Parallel validations"),
    isolate_fatal: bool = typer.Option(
        False, "--isolate-fatal", help="Keep going when an item hits a configuration error"
    ),
):
    """Validate every address in a file."""
    from burner_validator.batch import validate_emails
    from burner_validator.core.logging import setup_logging
    from burner_validator.errors import ConfigurationError
    from burner_validator.validator import get_validator

    setup_logging()
    emails = [line.strip() for line in file.read_text().splitlines() if line.strip()]
    options = _options(deep, no_mx, no_debounce, 5)

    async def run():
        validator = get_validator()
        await validator.reputation.start()
        return await validate_emails(
            emails,
            options,
            concurrency=concurrency,
            isolate_fatal=isolate_fatal,
            validator=validator,
        )

    try:
        outcome = asyncio.run(run())
    except ConfigurationError as e:
        _print_error(str(e))
        raise typer.Exit(1) from e

    typer.echo(outcome.model_dump_json(indent=2))


@app.command()
def stats():
    """Show blocklist sizes and health."""
    from burner_validator.core.logging import setup_logging
    from burner_validator.validator import get_validator, get_validator_stats

    setup_logging()
    asyncio.run(get_validator().reputation.start())

    report = get_validator_stats()
    typer.echo(json.dumps(report, indent=2))

    for name, source in report.items():
        for warning in source.get("health_warnings", []):
            _print_warning(f"{name}: {warning}")


@app.command()
def add_domain(domain: str = typer.Argument(..., help="Domain to block")):
    """Add a domain to the discovered-domains file."""
    from burner_validator.core.logging import setup_logging
    from burner_validator.reputation import get_reputation

    setup_logging()
    added = asyncio.run(get_reputation().add_discovered_domain(domain))

    if added:
        _print_success(f"Added {domain.strip().lower()}")
    else:
        _print_warning(f"{domain.strip().lower()} is already listed")


@app.command()
def refresh():
    """Re-fetch every blocklist and wait for completion."""
    from burner_validator.core.logging import setup_logging
    from burner_validator.reputation import get_reputation

    setup_logging()
    reputation = get_reputation()
    asyncio.run(reputation.refresh_all())

    for name, source in reputation.stats().items():
        if source.loaded:
            _print_success(f"{name}: {source.count} domains")
        else:
            _print_warning(f"{name}: not loaded")


if __name__ == "__main__":
    app()
