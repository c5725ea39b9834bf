"""
Command-line interface for ecsign.

Usage:
    ecsign keygen --curve secp256k1
    ecsign sign --key ec_private.pem message.bin
    ecsign verify --key ec_public.pem --signature "48:69:...:" message.bin
    ecsign curves
"""

import logging
from pathlib import Path
from typing import Optional

import click

from .algorithms import SUPPORTED_CURVES, SUPPORTED_DIGESTS
from .config import ECSignConfig
from .exceptions import ECSignError
from .signer import ECCSigner

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S"
)

logger = logging.getLogger(__name__)

EXIT_INVALID = 1
EXIT_ERROR = 2


def fail(ctx: click.Context, error: ECSignError):
    """Report a library error and exit with EXIT_ERROR."""
    logger.debug(f"Command failed: {error.to_dict()}")
    click.echo(click.style(f"✗ [{error.code}] {error.message}", fg="red"), err=True)
    ctx.exit(EXIT_ERROR)


@click.group()
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML or JSON config file")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_path: Optional[str], debug: bool):
    """ecsign - EC key generation, signing and verification"""
    ctx.ensure_object(dict)

    config = ECSignConfig.load(Path(config_path)) if config_path else ECSignConfig()

    logging.getLogger().setLevel(logging.DEBUG if debug else config.log_level_value)

    ctx.obj["config"] = config


@cli.command()
@click.option("--public", "public_path", type=click.Path(dir_okay=False),
              help="Public key output (default: <key_dir>/ec_public.pem)")
@click.option("--private", "private_path", type=click.Path(dir_okay=False),
              help="Private key output (default: <key_dir>/ec_private.pem)")
@click.option("--curve", "-c", default=None, help="secp256k1 or brainpool256r1")
@click.pass_context
def keygen(ctx, public_path: Optional[str], private_path: Optional[str], curve: Optional[str]):
    """Generate a key pair and write both halves as PEM."""
    config: ECSignConfig = ctx.obj["config"]

    public_path = Path(public_path) if public_path else config.public_key_path
    private_path = Path(private_path) if private_path else config.private_key_path
    curve = curve or config.default_curve

    for parent in {public_path.parent, private_path.parent}:
        parent.mkdir(parents=True, exist_ok=True)

    try:
        with ECCSigner(config) as signer:
            signer.generate_keys(public_path, private_path, curve)
    except ECSignError as e:
        fail(ctx, e)

    click.echo(click.style(f"✓ Generated {curve} key pair", fg="green"))
    click.echo(f"  Public:  {public_path}")
    click.echo(f"  Private: {private_path}")


@cli.command()
@click.option("--key", "-k", "key_path", type=click.Path(dir_okay=False),
              help="PEM private key (default: <key_dir>/ec_private.pem)")
@click.option("--digest", "-d", default=None, help="sha256 or sha1")
@click.argument("message", type=click.File("rb"))
@click.pass_context
def sign(ctx, key_path: Optional[str], digest: Optional[str], message):
    """Sign MESSAGE (a file, or - for stdin) and print the signature text."""
    config: ECSignConfig = ctx.obj["config"]
    data = message.read()

    try:
        with ECCSigner(config) as signer:
            signer.load_privkey(key_path or config.private_key_path)
            signer.sign(data, digest or config.default_digest)
            click.echo(signer.dump_signature())
    except ECSignError as e:
        fail(ctx, e)


@cli.command()
@click.option("--key", "-k", "key_path", type=click.Path(dir_okay=False),
              help="PEM public key (default: <key_dir>/ec_public.pem)")
@click.option("--signature", "-s", "signature_text", required=True,
              help="Signature text as printed by 'ecsign sign'")
@click.option("--digest", "-d", default=None, help="sha256 or sha1")
@click.argument("message", type=click.File("rb"))
@click.pass_context
def verify(ctx, key_path: Optional[str], signature_text: str, digest: Optional[str], message):
    """Verify a signature over MESSAGE. Exit code 0 if valid, 1 if not."""
    config: ECSignConfig = ctx.obj["config"]
    data = message.read()

    try:
        with ECCSigner(config) as signer:
            signer.load_pubkey(key_path or config.public_key_path)
            signature = signer.set_signature(signature_text)
            valid = signer.verify(data, signature, digest or config.default_digest)
    except ECSignError as e:
        fail(ctx, e)

    if valid:
        click.echo(click.style("valid", fg="green"))
    else:
        click.echo(click.style("invalid", fg="red"))
        ctx.exit(EXIT_INVALID)


@cli.command()
def curves():
    """List supported curves and digests."""
    click.echo("Curves:")
    for name in SUPPORTED_CURVES:
        click.echo(f"  {name}")
    click.echo("Digests:")
    for name in SUPPORTED_DIGESTS:
        click.echo(f"  {name}")


if __name__ == "__main__":
    cli()
