"""Main CLI entry point for Secret Rotator.

The command line rotates secrets held in AWS Secrets Manager, generates
secrets locally with the same options, and checks requests and configuration
files without touching the store.
"""

import json
from typing import IO, Optional, Tuple

import click

from secretrotator import __version__
from secretrotator.secrets import (
    Deadline,
    GeneratorOptions,
    KeyValueConfig,
    RotationRequest,
    SecretGenerator,
    SecretType,
    validate_rotation_request,
)
from secretrotator.utils.errors import ErrorHandler, RotatorError, format_validation_errors
from secretrotator.utils.logging import setup_logging


def generator_option_flags(func):
    """Attach the generator option flags shared by ``rotate`` and ``generate``."""
    options = [
        click.option("--length", type=int, default=32, show_default=True, help="Secret length"),
        click.option("--lowercase/--no-lowercase", default=True, show_default=True, help="Include lowercase letters"),
        click.option("--uppercase/--no-uppercase", default=True, show_default=True, help="Include uppercase letters"),
        click.option("--digits/--no-digits", default=True, show_default=True, help="Include digits"),
        click.option("--special/--no-special", default=False, show_default=True, help="Include special characters"),
        click.option("--exclude-ambiguous", is_flag=True, help="Leave out 0, O, l and 1"),
        click.option("--min-digits", type=int, default=None, help="Minimum number of digits"),
        click.option("--min-special", type=int, default=None, help="Minimum number of special characters"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_generator_options(
    length: int,
    lowercase: bool,
    uppercase: bool,
    digits: bool,
    special: bool,
    exclude_ambiguous: bool,
    min_digits: Optional[int],
    min_special: Optional[int],
) -> GeneratorOptions:
    return GeneratorOptions(
        length=length,
        include_lowercase=lowercase,
        include_uppercase=uppercase,
        include_digits=digits,
        include_special_chars=special,
        exclude_ambiguous=exclude_ambiguous,
        min_number_digits=min_digits,
        min_number_special=min_special,
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--dry-run", is_flag=True, help="Validate and show what would be done without touching the store")
@click.option("--log-file", help="Log to file in addition to console")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    envvar="SECRET_ROTATOR_CONFIG",
    help="Path to the YAML configuration file",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    dry_run: bool,
    log_file: Optional[str],
    config_path: Optional[str],
) -> None:
    """Secret Rotator - rotate secrets stored in AWS Secrets Manager."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["dry_run"] = dry_run
    ctx.obj["config_path"] = config_path
    ctx.obj["log_file"] = log_file
    ctx.obj["error_handler"] = ErrorHandler(verbose=verbose)

    setup_logging(verbose=verbose, log_file=log_file)


@cli.command()
@click.option(
    "--request",
    "request_file",
    type=click.File("r"),
    help="JSON rotation request ('-' reads stdin); overrides the options below",
)
@click.option("--secret-arn", help="ARN of the secret to rotate")
@click.option(
    "--secret-type",
    type=click.Choice([member.value for member in SecretType]),
    default=SecretType.PLAINTEXT.value,
    show_default=True,
    help="Shape of the secret body",
)
@click.option("--key", "keys", multiple=True, help="Key to rotate in a structured secret (repeatable; default: all keys)")
@click.option("--timeout", type=float, default=None, help="Give up before a store call after this many seconds")
@generator_option_flags
@click.pass_context
def rotate(
    ctx: click.Context,
    request_file: Optional[IO[str]],
    secret_arn: Optional[str],
    secret_type: str,
    keys: Tuple[str, ...],
    timeout: Optional[float],
    **generator_flags,
) -> None:
    """Rotate a secret and print the rotation response as JSON."""
    error_handler: ErrorHandler = ctx.obj["error_handler"]

    try:
        if request_file is not None:
            request = RotationRequest.from_json(request_file.read())
        else:
            request = RotationRequest(
                secret_arn=secret_arn or "",
                secret_type=secret_type,
                generator_options=build_generator_options(**generator_flags),
                key_value_config=KeyValueConfig(list(keys)) if keys else None,
            )

        if ctx.obj["dry_run"]:
            validate_rotation_request(request)
            click.echo(f"DRY RUN: Would rotate {request.secret_type} secret {request.secret_arn}")
            if request.keys_to_rotate:
                click.echo(f"DRY RUN: Keys: {', '.join(request.keys_to_rotate)}")
            return

        from secretrotator.config import ConfigManager
        from secretrotator.handler import build_rotator

        config = ConfigManager(ctx.obj["config_path"]).load_config()
        if config.verbose or config.log_file:
            # Command-line flags win over the configuration file
            setup_logging(
                verbose=ctx.obj["verbose"] or config.verbose,
                log_file=ctx.obj["log_file"] or config.log_file,
            )
        rotator = build_rotator(config)

    except Exception as e:
        error_handler.exit_with_error(e, "Secret rotation")
        return

    deadline = Deadline.after(timeout) if timeout is not None else None
    response = rotator.rotate_secret(request, deadline=deadline)

    click.echo(json.dumps(response.to_dict(), indent=2))

    if not response.success:
        error_handler.handle_error(response.error, "Secret rotation")
        ctx.exit(1)


@cli.command()
@click.option("--count", type=int, default=1, show_default=True, help="Number of secrets to generate")
@click.option("--show-alphabet", is_flag=True, help="Print the characters secrets are drawn from")
@generator_option_flags
@click.pass_context
def generate(ctx: click.Context, count: int, show_alphabet: bool, **generator_flags) -> None:
    """Generate secrets locally without touching the store."""
    options = build_generator_options(**generator_flags)
    generator = SecretGenerator()

    try:
        if show_alphabet:
            click.echo(f"Alphabet: {generator.build_alphabet(options)}", err=True)

        for _ in range(count):
            click.echo(generator.generate(options))

    except RotatorError as e:
        ctx.obj["error_handler"].exit_with_error(e, "Secret generation")


@cli.command()
@click.argument("request_file", type=click.File("r"))
@click.pass_context
def validate(ctx: click.Context, request_file: IO[str]) -> None:
    """Validate a JSON rotation request without rotating anything."""
    try:
        request = RotationRequest.from_json(request_file.read())
        validate_rotation_request(request)
    except RotatorError as e:
        ctx.obj["error_handler"].exit_with_error(e, "Request validation")
        return

    click.echo(f"✓ Request for {request.secret_arn} is valid")


@cli.command("check-config")
@click.argument("config_file", type=click.Path(dir_okay=False))
@click.pass_context
def check_config(ctx: click.Context, config_file: str) -> None:
    """Validate a configuration file."""
    from secretrotator.config import ConfigValidator

    errors = ConfigValidator().validate_config_file(config_file)
    if errors:
        click.echo(f"✗ {format_validation_errors(errors)}", err=True)
        ctx.exit(1)

    click.echo(f"✓ Configuration file {config_file} is valid")


if __name__ == "__main__":
    cli()
