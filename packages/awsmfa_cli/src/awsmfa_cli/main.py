#!/usr/bin/env python3
"""
Fetch temporary AWS credentials and merge them into a dotenv file (.env).

Usage:
    awsmfa 123456
    awsmfa --profile work --duration-hours 12 --directory ~/src/app 123456
"""

import sys
from pathlib import Path
from typing import Optional, Sequence

import click
from InquirerPy import inquirer

from awsmfa import __version__
from awsmfa.config import MfaConfig, build_config
from awsmfa.credentials import fetch_session_credentials
from awsmfa.dotenv_update import DOTENV_FILENAME, UpdateResult, update_dotenv
from awsmfa.environments import (
    default_duration_hours,
    default_log_format,
    default_log_level,
    default_profile,
    default_region,
    get_aws_session,
    load_user_env,
)
from awsmfa.exceptions import AwsMfaError
from awsmfa.logging import log_error, log_info, log_warning, setup_logging


def choose_mfa_device(serials: Sequence[str]) -> str:
    """Let the user pick an MFA device when several are registered."""
    if not sys.stdin.isatty():
        return serials[0]
    return inquirer.select(
        message="Select MFA device:",
        choices=list(serials),
        default=serials[0],
    ).execute()


def run(config: MfaConfig) -> UpdateResult:
    """Fetch credentials for config and write them into its dotenv file."""
    session = get_aws_session(profile=config.profile, region=config.region)
    credentials = fetch_session_credentials(
        session,
        token_code=config.mfa_code,
        duration_hours=config.duration_hours,
        serial_number=config.serial_number,
        chooser=choose_mfa_device,
    )
    return update_dotenv(config.directory, credentials.as_replacements())


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.argument("mfa_code", required=False)
@click.option(
    "--profile",
    "-p",
    default=default_profile,
    show_default="default",
    help="AWS profile to fetch temp credentials with",
)
@click.option(
    "--duration-hours",
    "-d",
    default=default_duration_hours,
    show_default="36",
    help="Duration, in hours, credentials should remain valid (min:1 max:36)",
)
@click.option(
    "--directory",
    "-C",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help=f"Directory holding the {DOTENV_FILENAME} file (default: current directory)",
)
@click.option("--serial-number", help="MFA device serial number (skips device lookup)")
@click.option("--region", default=default_region, help="AWS region for STS and IAM calls")
@click.option(
    "--log-level",
    default=default_log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for stderr diagnostics",
)
@click.option(
    "--log-format",
    default=default_log_format,
    type=click.Choice(["text", "json"]),
    help="Log format for stderr diagnostics",
)
def cli(
    mfa_code: Optional[str],
    profile: str,
    duration_hours: str,
    directory: Optional[Path],
    serial_number: Optional[str],
    region: Optional[str],
    log_level: str,
    log_format: str,
):
    """Fetch temporary AWS credentials and merge into dotenv file (.env)"""
    setup_logging(level=log_level, format_type=log_format)

    try:
        config = build_config(
            mfa_code=mfa_code or "",
            profile=profile,
            duration_hours=duration_hours,
            directory=directory,
            serial_number=serial_number,
            region=region,
        )
        result = run(config)
    except AwsMfaError as e:
        log_error("awsmfa failed", cause=str(e), exit_code=e.exit_code)
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(e.exit_code)

    log_info("Updated dotenv file", path=str(result.path), replaced=result.replaced)
    if result.ignored:
        log_warning(
            f"{result.path.name} does not declare these keys, they were not added",
            ignored=result.ignored,
        )
    click.echo(f"Success! {DOTENV_FILENAME} file updated")


def main() -> None:
    load_user_env()
    cli()


if __name__ == "__main__":
    main()
