"""Command line entry point for publishing boxes.

Parameters are given as ``key=value`` tokens:

        box-deploy path=/build/myapp-1.2.img repo=/srv/boxes url=http://boxes.example.com/myapp
        box-deploy file=out.img name=myapp version=1.3 desc="Base image" provider=libvirt ...
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import click

from box_deployer import __version__
from box_deployer.config import LOG_LEVELS, configure_logging, load_settings
from box_deployer.errors import DeployerError
from box_deployer.parameters import USAGE, validate_request
from box_deployer.publisher import publish

logger = logging.getLogger(__name__)


def _print_version(
    ctx: click.Context, param: click.Parameter, value: bool
) -> None:  # pragma: no cover - simple utility
    """Callback to print only the raw version and exit early."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(__version__)
    ctx.exit()


def _fail(message: str, usage: bool = False) -> NoReturn:
    click.echo(message, err=True)
    if usage:
        click.echo(f"\n\n{USAGE}", err=True)
    raise SystemExit(1)


@click.command(
    name="box-deploy",
    context_settings={"ignore_unknown_options": True},
    epilog=USAGE,
)
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the box-deployer version and exit.",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (env: BOX_DEPLOYER_LOG_LEVEL, default WARNING)",
)
@click.option(
    "--env-file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read BOX_DEPLOYER_* settings from this .env file",
)
@click.argument("params", nargs=-1)
def deploy(log_level: str | None, env_file: Path | None, params: tuple[str, ...]):
    """Copy an artifact into a box repository and update its JSON catalog.

    PARAMS are key=value tokens: path/file, repo and url are mandatory;
    name, version, ext/extension, desc/description and provider are
    optional.
    """
    try:
        settings = load_settings(env_file)
    except DeployerError as exc:
        _fail(str(exc))
    configure_logging(log_level or settings.log_level)

    validation = validate_request(params, settings)
    request = validation.request
    if request is None or validation.error is not None:
        _fail(f"Wrong parameters! {validation.error}", usage=True)

    try:
        result = publish(request, chunk_size=settings.chunk_size)
    except DeployerError as exc:
        logger.debug("Publish failed", exc_info=True)
        _fail(f"Publishing failed: {exc}")

    click.echo(f"Artifact: {result.artifact_path}")
    click.echo(f"Catalog:  {result.catalog_path}")
    click.echo(f"Checksum: {result.checksum}")


__all__ = ["deploy"]
