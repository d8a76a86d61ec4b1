"""
Command-line interface for hotcert.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import click

from hotcert.common.config import Config
from hotcert.common.exceptions import CertManagerError, LoadError
from hotcert.common.logging_utils import setup_logger
from hotcert.keygen import KEY_TYPES, KeyGenerator
from hotcert.loader import load_key_pair
from hotcert.manager import CertManager
from hotcert.server import serve as serve_https

logger = logging.getLogger("hotcert")

cert_argument = click.argument("cert", type=click.Path(dir_okay=False))
key_argument = click.argument("key", type=click.Path(dir_okay=False))
debounce_option = click.option(
    "--debounce",
    default=None,
    type=click.FloatRange(min=0, min_open=True),
    help="Seconds to wait for changes to settle (default: HOTCERT_DEBOUNCE_SECONDS or 1.0)",
)


@click.group()
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: HOTCERT_LOG_LEVEL or INFO)",
)
def cli(log_level: str | None) -> None:
    """Live reloading of TLS certificates and keys"""
    level = logging.getLevelName(log_level.upper()) if log_level else Config().LOG_LEVEL
    setup_logger(logger, level)


@cli.command()
@cert_argument
@key_argument
def check(cert: str, key: str) -> None:
    """Validate a certificate and key pair"""
    try:
        pair = load_key_pair(cert, key)
    except LoadError as err:
        raise click.ClickException(str(err)) from err

    info = pair.info()
    click.echo(f"subject:     {info.subject}")
    click.echo(f"issuer:      {info.issuer}")
    click.echo(f"serial:      {info.serial_number:x}")
    click.echo(f"not before:  {info.not_valid_before.isoformat()}")
    click.echo(f"not after:   {info.not_valid_after.isoformat()}")
    click.echo(f"sha256:      {info.fingerprint_sha256}")
    click.echo(f"chain:       {info.chain_length} certificate(s)")
    click.echo("certificate and key match")


@cli.command()
@click.option("--out-dir", default=".", type=click.Path(file_okay=False), help="Directory to write the pair to")
@click.option("--name", default="server", help="Base file name (<name>.crt, <name>.key)")
@click.option("--common-name", default="localhost", help="Certificate common name")
@click.option("--days", default=None, type=click.IntRange(min=1), help="Validity in days")
@click.option("--key-type", default=None, type=click.Choice(KEY_TYPES), help="Key algorithm")
def selfsign(
    out_dir: str, name: str, common_name: str, days: int | None, key_type: str | None
) -> None:
    """Generate a self-signed certificate and key"""
    generated = KeyGenerator(Path(out_dir)).generate(name, common_name, days, key_type)
    click.echo(f"Certificate: {generated.cert_path}")
    click.echo(f"Key: {generated.key_path}")


def _start_manager(cert: str, key: str, debounce: float | None) -> CertManager:
    try:
        manager = CertManager(cert, key, logger=logger, debounce=debounce)
        manager.start()
    except CertManagerError as err:
        raise click.ClickException(str(err)) from err
    return manager


@cli.command()
@cert_argument
@key_argument
@debounce_option
def watch(cert: str, key: str, debounce: float | None) -> None:
    """Watch a certificate and key pair and log reloads"""
    manager = _start_manager(cert, key, debounce)
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        pass
    finally:
        manager.stop()


@cli.command()
@cert_argument
@key_argument
@click.option("--host", default=None, help="Host to bind to (default: HOTCERT_SERVER_HOST or 127.0.0.1)")
@click.option("--port", default=None, type=int, help="Port to bind to (default: HOTCERT_SERVER_PORT or 8443)")
@debounce_option
def serve(
    cert: str, key: str, host: str | None, port: int | None, debounce: float | None
) -> None:
    """Serve HTTPS with a live-reloaded certificate"""
    config = Config()
    manager = _start_manager(cert, key, debounce)
    try:
        serve_https(manager, host or config.SERVER_HOST, port or config.SERVER_PORT)
    except KeyboardInterrupt:
        pass
    finally:
        manager.stop()


if __name__ == "__main__":
    cli()
