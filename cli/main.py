"""
sealchain CLI for key generation and keychain management.
"""

import logging
from pathlib import Path
from typing import NoReturn, Optional

import click

from sealchain import __version__
from sealchain.config import Settings, load_settings
from sealchain.crypto.keys import PublicKey, SecretKey, generate_keypair
from sealchain.errors import ConfigError, KeychainError, KeyFileError
from sealchain.keychain import Keychain

logger = logging.getLogger(__name__)


def _fail(error: Exception) -> NoReturn:
    click.echo(f"✗ Error: {error}", err=True)
    raise click.Abort()


def _open_keychain(ctx: click.Context) -> Keychain:
    settings: Settings = ctx.obj["settings"]
    try:
        if settings.keychain_dir:
            return Keychain.open_at(settings.keychain_path())
        return Keychain.open()
    except KeychainError as e:
        _fail(e)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--keychain-dir",
    type=click.Path(file_okay=False),
    help="Keychain directory (overrides config and SEALCHAIN_KEYCHAIN_DIR)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Path to YAML config file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    keychain_dir: Optional[str],
    config_path: Optional[str],
    verbose: bool,
) -> None:
    """sealchain - manage X25519 key files and a local keychain."""
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        _fail(e)

    if keychain_dir:
        settings = settings.model_copy(update={"keychain_dir": keychain_dir})

    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.option(
    "--public", "-p", "public_path", default="public.pem", help="Output public key file"
)
@click.option(
    "--secret", "-s", "secret_path", default="secret.pem", help="Output secret key file"
)
def generate(public_path: str, secret_path: str) -> None:
    """Generate new key files outside the keychain."""
    for path, type_ in ((public_path, "public"), (secret_path, "secret")):
        if Path(path).is_file():
            click.echo(f'✗ Error: {type_} key already exists at "{path}"', err=True)
            raise click.Abort()

    public, secret = generate_keypair()
    try:
        public.to_file(public_path, exclusive=True)
        click.echo(f'✓ Wrote public key "{public_path}"')
        secret.to_file(secret_path, exclusive=True)
        click.echo(f'✓ Wrote secret key "{secret_path}"')
    except KeyFileError as e:
        _fail(e)


# Keychain commands
@cli.group()
def keychain() -> None:
    """Interact with stored keypairs."""
    pass


@keychain.command(name="generate")
@click.argument("name")
@click.pass_context
def keychain_generate(ctx: click.Context, name: str) -> None:
    """Create a new keypair and store it in the keychain."""
    chain = _open_keychain(ctx)
    public, secret = generate_keypair()
    try:
        chain.create(name, public, secret)
    except KeychainError as e:
        _fail(e)
    click.echo(f'✓ Created keypair "{name}"')
    click.echo(f"  Public key: {public.to_hex()}")


@keychain.command(name="import")
@click.argument("name")
@click.argument("public_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("secret_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def keychain_import(ctx: click.Context, name: str, public_file: str, secret_file: str) -> None:
    """Import existing public/secret key files into the keychain."""
    chain = _open_keychain(ctx)
    try:
        public = PublicKey.from_file(public_file)
        secret = SecretKey.from_file(secret_file)
    except KeyFileError as e:
        _fail(e)

    if secret.public_key() != public:
        logger.warning(f"Secret key {secret_file} does not match public key {public_file}")

    try:
        chain.create(name, public, secret)
    except KeychainError as e:
        _fail(e)
    click.echo(f'✓ Imported keypair "{name}"')


@keychain.command(name="export")
@click.argument("name")
@click.option("--public", "-p", "public_path", help="Output public key file (default <name>.pub.pem)")
@click.option("--secret", "-s", "secret_path", help="Output secret key file (default <name>.sec.pem)")
@click.option("--force", "-f", is_flag=True, help="Overwrite existing output files")
@click.pass_context
def keychain_export(
    ctx: click.Context,
    name: str,
    public_path: Optional[str],
    secret_path: Optional[str],
    force: bool,
) -> None:
    """Export a stored keypair to files."""
    chain = _open_keychain(ctx)
    try:
        keypair = chain.get(name)
    except KeychainError as e:
        _fail(e)

    public_path = public_path or f"{name}.pub.pem"
    secret_path = secret_path or f"{name}.sec.pem"
    if not force:
        for path, type_ in ((public_path, "public"), (secret_path, "secret")):
            if Path(path).exists():
                click.echo(f'✗ Error: {type_} key already exists at "{path}"', err=True)
                raise click.Abort()

    try:
        keypair.public.to_file(public_path, exclusive=not force)
        click.echo(f'✓ Exported public key "{public_path}"')
        keypair.secret.to_file(secret_path, exclusive=not force)
        click.echo(f'✓ Exported secret key "{secret_path}"')
    except KeyFileError as e:
        _fail(e)


@keychain.command(name="list")
@click.option("--long", "-l", "long_format", is_flag=True, help="Show public keys")
@click.pass_context
def keychain_list(ctx: click.Context, long_format: bool) -> None:
    """List keypairs in the keychain."""
    chain = _open_keychain(ctx)
    try:
        keypairs = sorted(chain.list(), key=lambda keypair: str(keypair.name))
    except KeychainError as e:
        _fail(e)

    for keypair in keypairs:
        if long_format:
            click.echo(f"{keypair.name}  {keypair.public.to_hex()}")
        else:
            click.echo(str(keypair.name))


@keychain.command(name="show")
@click.argument("name")
@click.pass_context
def keychain_show(ctx: click.Context, name: str) -> None:
    """Show a stored keypair's public key."""
    chain = _open_keychain(ctx)
    try:
        keypair = chain.get(name)
    except KeychainError as e:
        _fail(e)
    click.echo(f"Name: {keypair.name}")
    click.echo(f"Public key (hex): {keypair.public.to_hex()}")


@keychain.command(name="find")
@click.argument("public_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def keychain_find(ctx: click.Context, public_file: str) -> None:
    """Find the stored keypair matching a public key file."""
    chain = _open_keychain(ctx)
    try:
        public = PublicKey.from_file(public_file)
        keypair = chain.find(public)
    except (KeyFileError, KeychainError) as e:
        _fail(e)
    click.echo(str(keypair.name))


@keychain.command(name="remove")
@click.argument("name")
@click.pass_context
def keychain_remove(ctx: click.Context, name: str) -> None:
    """Remove a keypair from the keychain."""
    chain = _open_keychain(ctx)
    try:
        chain.remove(name)
    except KeychainError as e:
        _fail(e)
    click.echo(f'✓ Removed keypair "{name}"')


@keychain.command(name="rename")
@click.argument("old_name")
@click.argument("new_name")
@click.pass_context
def keychain_rename(ctx: click.Context, old_name: str, new_name: str) -> None:
    """Rename a keypair."""
    chain = _open_keychain(ctx)
    try:
        chain.rename(old_name, new_name)
    except KeychainError as e:
        _fail(e)
    click.echo(f'✓ Renamed "{old_name}" -> "{new_name}"')


if __name__ == "__main__":
    cli()
