# takoyaki/cli/__main__.py

"""
Takoyaki CLI

Usage: python -m takoyaki.cli [command] [options]

Runs the RPC server or queries the archive directly for a single block or
the capability summary.
"""

import asyncio
import sys

import click
import msgspec

from takoyaki import create_client
from takoyaki.core.config import TakoyakiConfig
from takoyaki.core.logging import TakoyakiLogger
from takoyaki.service import SubqlApiService
from takoyaki.types import TakoyakiError


encoder = msgspec.json.Encoder(decimal_format="number")


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, verbose):
    """Takoyaki - Solana blocks from the SQD archive in RPC shape"""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    try:
        config = TakoyakiConfig.from_env()
    except ValueError as e:
        raise click.ClickException(str(e))
    ctx.obj['config'] = config

    # Configure logging
    log_level = "DEBUG" if verbose else config.logging.log_level
    TakoyakiLogger.reset()
    TakoyakiLogger.configure(
        log_dir=config.logging.log_dir,
        log_level=log_level,
        console_enabled=True,
        file_enabled=config.logging.log_dir is not None,
        structured_format=config.logging.structured_format
    )


@cli.command()
@click.option('--host', default=None, help='Bind address (default from TAKOYAKI_HOST)')
@click.option('--port', default=None, type=int, help='Port (default from TAKOYAKI_PORT)')
@click.pass_context
def serve(ctx, host, port):
    """Run the JSON-RPC server"""
    import uvicorn

    config = ctx.obj['config']
    uvicorn.run(
        "api.main:app",
        host=host or config.server.host,
        port=port or config.server.port,
        log_level="debug" if ctx.obj['verbose'] else "info",
    )


@cli.command()
@click.argument('number', type=int)
@click.pass_context
def block(ctx, number):
    """Fetch one block (slot on the portal, height on the legacy archive) and print it"""
    result = run_with_service(ctx.obj['config'], lambda service: service.fetch_block(number))
    click.echo(encoder.encode(result))


@cli.command()
@click.pass_context
def capabilities(ctx):
    """Print the filter capabilities of the configured archive"""
    result = run_with_service(ctx.obj['config'], lambda service: service.filter_blocks_capabilities())
    click.echo(encoder.encode(result))


def run_with_service(config: TakoyakiConfig, call):
    async def run():
        client = await create_client(config.archive)
        try:
            return await call(SubqlApiService(client))
        finally:
            await client.aclose()

    try:
        return asyncio.run(run())
    except TakoyakiError as e:
        click.echo(f"Error: {e.message}", err=True)
        click.echo(encoder.encode(e.to_processing_error()), err=True)
        sys.exit(1)


if __name__ == '__main__':
    cli()
