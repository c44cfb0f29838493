"""
azblob Command-Line Interface

Put, append, get, delete and list blobs, and print SAS links.

Author: azblob Contributors
Date: 2026-10-18
"""

import sys
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import click
import httpx

from azblob import __version__
from azblob.core.config_manager import ConfigManager
from azblob.core.logging_config import setup_logging
from azblob.exceptions import AzBlobError, StorageError
from azblob.services.blob import BlobStorageClient, BlobType

logger = logging.getLogger("azblob.cli")


def _fail(message: str) -> None:
    click.echo(f"[ERROR] {message}", err=True)
    sys.exit(1)


def _build_client(ctx: click.Context) -> BlobStorageClient:
    config = ctx.obj["config"]
    if not config.connection_string:
        _fail("No connection string. Use --connection-string or AZBLOB_CONNECTION_STRING.")
    return BlobStorageClient.from_connection_string(
        config.connection_string,
        timeout=config.transport.timeout,
        verify=config.transport.verify,
    )


def _run(ctx: click.Context, operation) -> None:
    """Run ``operation(client)`` with a fresh client and map failures to exit 1."""

    async def runner(client: BlobStorageClient):
        async with client:
            return await operation(client)

    try:
        return asyncio.run(runner(_build_client(ctx)))
    except StorageError as e:
        _fail(f"Storage service returned HTTP {e.status_code}: {e.message}")
    except AzBlobError as e:
        _fail(e.message)
    except httpx.HTTPError as e:
        _fail(f"Request failed: {e}")


async def _stream_response(response: httpx.Response, output: Optional[Path]) -> int:
    """Write a streamed response body to a file or stdout; return the status."""
    try:
        if response.status_code >= 300:
            body = (await response.aread()).decode("utf-8", errors="replace")
            click.echo(f"[ERROR] HTTP {response.status_code}: {body}", err=True)
            return response.status_code
        if output:
            with open(output, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)
        else:
            stdout = click.get_binary_stream("stdout")
            async for chunk in response.aiter_bytes():
                stdout.write(chunk)
            stdout.flush()
        return response.status_code
    finally:
        await response.aclose()


def _read_content(text: Optional[str], file: Optional[Path]):
    """Return (body, body_bytes) from --text or --file."""
    if text is not None and file is not None:
        _fail("--text and --file are exclusive, pass only one of them.")
    if file is not None:
        return None, file.read_bytes()
    return text, None


@click.group()
@click.version_option(version=__version__, prog_name="azblob")
@click.option(
    "--connection-string",
    envvar="AZBLOB_CONNECTION_STRING",
    help="Storage account connection string",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (YAML or JSON)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level",
)
@click.pass_context
def cli(ctx, connection_string: Optional[str], config_file: Optional[Path], log_level: Optional[str]):
    """
    azblob - Minimal Azure Blob Storage client

    Paths have the form /container/blob.
    """
    overrides = {}
    if connection_string:
        overrides["connection_string"] = connection_string
    if log_level:
        overrides["logging"] = {"level": log_level.upper()}

    config = ConfigManager().load(
        config_file=str(config_file) if config_file else None,
        cli_overrides=overrides,
    )
    setup_logging(
        level=config.logging.level,
        format_type=config.logging.format,
        log_file=config.logging.file,
        rotation_size=config.logging.rotation_size,
        rotation_count=config.logging.rotation_count,
        module_levels=config.logging.module_levels,
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("path")
@click.option("--text", "-t", help="Text content")
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File to upload",
)
@click.option("--append", "append_blob", is_flag=True, help="Create an append blob")
@click.option("--content-type", help="Content type of the blob")
@click.option(
    "--meta",
    multiple=True,
    help="Metadata in key=value format (can specify multiple times)",
)
@click.pass_context
def put(ctx, path: str, text: Optional[str], file: Optional[Path], append_blob: bool,
        content_type: Optional[str], meta: tuple):
    """
    Upload a blob.

    Examples:
        azblob put /container/hello.txt --text "Hello, World!"
        azblob put /container/image.png --file image.png --content-type image/png
        azblob put /container/app.log --append --text "" --meta source=cli
    """
    body, body_bytes = _read_content(text, file)

    metadata = {}
    for item in meta:
        if "=" not in item:
            _fail(f"Invalid metadata '{item}', expected key=value")
        key, val = item.split("=", 1)
        metadata[key] = val

    blob_type = BlobType.APPEND_BLOB if append_blob else BlobType.BLOCK_BLOB
    _run(ctx, lambda client: client.put_blob(
        path,
        body=body,
        body_bytes=body_bytes,
        blob_type=blob_type,
        content_type=content_type,
        metadata=metadata,
    ))
    click.echo(f"[OK] Uploaded {blob_type.display_name} {path}")


@cli.command()
@click.argument("path")
@click.option("--text", "-t", help="Text content")
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File whose content is appended",
)
@click.pass_context
def append(ctx, path: str, text: Optional[str], file: Optional[Path]):
    """
    Append a block to an append blob.

    Example:
        azblob append /container/app.log --text "line 2"
    """
    body, body_bytes = _read_content(text, file)
    _run(ctx, lambda client: client.append_block(path, body=body, body_bytes=body_bytes))
    click.echo(f"[OK] Appended to {path}")


@cli.command()
@click.argument("path")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the blob to a file instead of stdout",
)
@click.pass_context
def get(ctx, path: str, output: Optional[Path]):
    """
    Download a blob.

    Examples:
        azblob get /container/hello.txt
        azblob get /container/image.png -o image.png
    """

    async def operation(client: BlobStorageClient):
        return await _stream_response(await client.get_blob(path), output)

    if _run(ctx, operation) >= 300:
        sys.exit(1)


@cli.command()
@click.argument("path")
@click.pass_context
def delete(ctx, path: str):
    """
    Delete a blob.

    Example:
        azblob delete /container/old.txt
    """

    async def operation(client: BlobStorageClient):
        response = await client.delete_blob(path)
        try:
            await response.aread()
            return response.status_code, response.text
        finally:
            await response.aclose()

    status, body = _run(ctx, operation)
    if status >= 300:
        _fail(f"HTTP {status}: {body}")
    click.echo(f"[OK] Deleted {path}")


@cli.command(name="list")
@click.argument("path")
@click.pass_context
def list_blobs(ctx, path: str):
    """
    Print the raw XML listing of a container.

    Examples:
        azblob list /container
        azblob list /container/logs-
    """

    async def operation(client: BlobStorageClient):
        return await _stream_response(await client.list_blobs_raw(path), None)

    if _run(ctx, operation) >= 300:
        sys.exit(1)


@cli.command()
@click.argument("path")
@click.option(
    "--expires-in",
    default=3600,
    type=click.IntRange(min=1),
    help="Link lifetime in seconds",
    show_default=True,
)
@click.pass_context
def link(ctx, path: str, expires_in: int):
    """
    Print a read-only SAS link for a blob.

    Example:
        azblob link /container/report.pdf --expires-in 600
    """
    expiry = datetime.now(timezone.utc) + timedelta(seconds=expires_in)

    async def operation(client: BlobStorageClient):
        return client.get_blob_link(path, expiry=expiry)

    click.echo(str(_run(ctx, operation)))


@cli.command()
def version():
    """Show azblob version."""
    click.echo(f"azblob version {__version__}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
