"""
Command line entry point for the Cadence client.

Runs the startup sequence against the remembered default server, or against
--host/--port when the app ends up on the lock screen.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Setup logging first
from cadence.obs import logger

from cadence.app import MediaApp
from cadence.config import STREAM_PORT_OFFSET, Settings


DEFAULT_PORT = 3000


async def run(args: argparse.Namespace) -> int:
    overrides = {}
    if args.config_dir:
        overrides['config_dir'] = Path(args.config_dir)
    app = MediaApp(Settings(**overrides))

    try:
        connected = await app.start()

        if not connected and args.host:
            logger.info(f"Connecting to {args.host}:{args.port} (stream on {args.port + STREAM_PORT_OFFSET})")
            connected = await app.connect(args.host, args.port, remember=args.remember)

        if not connected:
            logger.error("Not connected to a media server")
            return 1

        server = app.bridge.state.active_server
        logger.info(f"Connected to {server.address if server else 'media server'}")

        if args.stay:
            logger.info("Listening for announcements, press Ctrl+C to quit")
            while app.connected:
                await asyncio.sleep(1)
            logger.warning("Connection lost")
        return 0
    finally:
        await app.stop()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Cadence - media player client')
    parser.add_argument('--host', default=None, help='Media server host, used when no default server connects')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT, help=f'Media server HTTP port (default: {DEFAULT_PORT})')
    parser.add_argument('--remember', action='store_true', help='Store the server and make it the default')
    parser.add_argument('--config-dir', default=None, help='Config directory (default: per-user config dir)')
    parser.add_argument('--stay', action='store_true', help='Keep running after connecting')

    args = parser.parse_args()

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)


if __name__ == '__main__':
    main()
