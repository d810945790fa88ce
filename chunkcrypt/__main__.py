"""
Demo: encrypt a file, then decrypt it again with the generated key file.

    python -m chunkcrypt [PLAINTEXT] [--workdir DIR] [--chunk-size N]

Writes test.enc, test.key and test.txt into the work directory. When
PLAINTEXT does not exist, a small sample file is created first.
"""

import dataclasses
from pathlib import Path
from typing import Optional

import click

from chunkcrypt.core.config import ChunkCryptConfig
from chunkcrypt.core.crypto.chacha20 import ChaCha20Cipher
from chunkcrypt.core.errors import ChunkCryptError
from chunkcrypt.core.file_ops import decrypt_file, encrypt_file
from chunkcrypt.core.logging import configure_logging

SAMPLE_TEXT = "Test Data To Encrypt!"


def run_demo(plaintext: Path, workdir: Path, config: ChunkCryptConfig) -> Path:
    cipher_path = workdir / "test.enc"
    key_path = workdir / "test.key"
    decrypted_path = workdir / "test.txt"

    key = ChaCha20Cipher.generate_key()

    if not plaintext.exists():
        click.echo(f'Creating Example File To Encrypt: "{plaintext.resolve()}"')
        plaintext.write_text(SAMPLE_TEXT)

    click.echo(f'Encrypting "{plaintext.resolve()}"')
    encrypt_file(key, plaintext, cipher_path, key_path, config=config)
    click.echo(f'File Successfully Encrypted As "{cipher_path.resolve()}"')

    click.echo(
        f'Using Encryption KeyFile ("{key_path.resolve()}") to '
        f'decrypt "{cipher_path.resolve()}" into "{decrypted_path.resolve()}".'
    )
    decrypt_file(key_path, cipher_path, decrypted_path, config=config)
    click.echo(f'The contents of "{decrypted_path.resolve()}" should now match "{plaintext.resolve()}".')

    return decrypted_path


@click.command()
@click.argument(
    "plaintext",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-w",
    "--workdir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory for the ciphertext, key file and decrypted output",
)
@click.option(
    "-c",
    "--chunk-size",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum chunk size in bytes (default from configuration)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
def cli(plaintext: Optional[Path], workdir: Path, chunk_size: Optional[int], log_level: str):
    """Encrypt PLAINTEXT (default: workdir/Test.xyz) and decrypt it again."""
    base = ChunkCryptConfig.load()

    try:
        config = ChunkCryptConfig(
            paths=base.paths,
            chunking=dataclasses.replace(
                base.chunking,
                max_chunk_size=chunk_size or base.chunking.max_chunk_size,
            ),
            logging=dataclasses.replace(base.logging, level=log_level.upper()),
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--chunk-size") from e

    configure_logging(config)

    if not ChaCha20Cipher.is_supported():
        raise click.ClickException("ChaCha20-Poly1305 is not supported by this crypto backend.")
    click.echo("ChaCha20-Poly1305 is supported! Files can be encrypted / decrypted.")

    workdir.mkdir(parents=True, exist_ok=True)
    if plaintext is None:
        plaintext = workdir / "Test.xyz"

    try:
        run_demo(plaintext, workdir, config)
    except ChunkCryptError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
