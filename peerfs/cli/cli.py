import logging
import asyncio
from dataclasses import replace
import click
from peerfs.node.crypto import create_peer_identity, to_did_key
from peerfs.web import GatewayContext, WebServer
from .config_file import load_config

# Main CLI to run the peerfs gateway.
# It utilizes the 'click' library.

@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Will print verbose messages.")
def cli(verbose:bool):
    #print logs to console
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)

#===========================================================
# 'serve' command
#===========================================================
@cli.command(context_settings={'show_default': True})
@click.option("--config", "-c", "config_file", required=False, default=None, type=click.Path(exists=True, dir_okay=False),
    help="Path to a peerfs.toml file. Options given on the command line take precedence.")
@click.option("--host", required=False, default=None, help="Host the web server binds to. [default: 127.0.0.1]")
@click.option("--port", "-p", required=False, default=None, type=int, envvar="PORT",
    help="Port of the web server, also read from the PORT environment variable. [default: 9632]")
@click.option("--fetch-timeout", required=False, default=None, type=float,
    help="Seconds a node waits for a block from a linked peer. [default: 10.0]")
def serve(config_file:str|None, host:str|None, port:int|None, fetch_timeout:float|None):
    """Starts the web server with two (not yet started) nodes."""
    print("-> Starting Web Server")
    try:
        config = load_config(config_file)
        if host is not None:
            config.host = host
        if port is not None:
            config.port = port
        if fetch_timeout is not None:
            config.node = replace(config.node, fetch_timeout=fetch_timeout)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    async def ainit():
        web_server = WebServer(GatewayContext(config.node))
        await web_server.run(host=config.host, port=config.port)

    asyncio.run(ainit())

#===========================================================
# 'peer-id' command
#===========================================================
@cli.command(name="peer-id")
def peer_id():
    """Generates a new peer identity and prints it."""
    identity = create_peer_identity()
    print("Peer id:    ", identity.peer_id)
    print("DID:        ", to_did_key(identity.public_key))
    print("Public key: ", identity.public_key.hex())
    # Danger: keep the private key to yourself
    print("Private key:", identity.private_key.hex())

if __name__ == '__main__':
    cli()
