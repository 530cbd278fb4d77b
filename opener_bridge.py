"""
Opener Bridge - Launcher

Usage:
    python opener_bridge.py                                   # Start server on port 8557
    python opener_bridge.py --list                            # Print registered commands, exit
    python opener_bridge.py --run opener.custom.0 ~/src/app   # Run one command in a folder, exit
    python opener_bridge.py --config settings.json --port 9000

Environment variables:
    OPENER_SETTINGS_PATH  JSON settings file holding "opener.customFolders"
    OPENER_API_TOKEN      Bearer token for the HTTP endpoints
    OPENER_NAMESPACE      Command id namespace (default "opener")
    OPENER_PORT           HTTP port (default 8557)
"""
import argparse
import asyncio
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
import uvicorn

from opener import config
from opener.escape import build_command_line
from opener.log_sink import LogSink, OutputChannel
from opener.registry import ActionRegistry
from opener.router import mount_opener


def build_registry(settings_path: Path, sink: LogSink, namespace: str = config.NAMESPACE) -> ActionRegistry:
    registry = ActionRegistry(sink, namespace=namespace)
    registry.activate(config.load_custom_folders(settings_path, sink, namespace))
    return registry


def create_app(settings_path: Path = config.SETTINGS_PATH,
               api_token: str = config.API_TOKEN,
               sink: Optional[LogSink] = None,
               namespace: str = config.NAMESPACE) -> FastAPI:
    sink = sink or OutputChannel()
    registry = build_registry(settings_path, sink, namespace)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        registry.deactivate()

    app = FastAPI(title="Opener Bridge", version="0.1.0", lifespan=lifespan)
    mount_opener(app, registry, settings_path, api_token)

    @app.get("/health")
    def health_check():
        return {"status": "ready", "version": "0.1.0", "modules": {"opener": "active"}}

    return app


def run_list(settings_path: Path) -> int:
    registry = build_registry(settings_path, OutputChannel(stream=sys.stderr))
    for command_id, template in registry.commands().items():
        print(f"{command_id}\t{template.label}\t{build_command_line(template.command, template.args)}")
    return 0


def run_once(settings_path: Path, command_id: str, folder: str) -> int:
    """Run one command, print any failure notification to stderr."""
    registry = build_registry(settings_path, OutputChannel(stream=sys.stderr))
    if registry.get(command_id) is None:
        print(f"Unknown command: {command_id}", file=sys.stderr)
        return 2

    def notify(message: str) -> None:
        print(message, file=sys.stderr)

    result = asyncio.run(registry.dispatch(command_id, folder, notify=notify))
    return 0 if result.ok else 1


def run_server(settings_path: Path, port: int = config.PORT):
    app = create_app(settings_path)
    print(f"[OK] Opener Bridge serving at http://localhost:{port}/opener")
    uvicorn.run(app, host="127.0.0.1", port=port, log_level="warning")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Opener Bridge")
    parser.add_argument("--config", type=Path, default=config.SETTINGS_PATH, help="Settings JSON file")
    parser.add_argument("--list", action="store_true", help="List registered commands and exit")
    parser.add_argument("--run", nargs=2, metavar=("COMMAND_ID", "FOLDER"), help="Run one command and exit")
    parser.add_argument("--port", type=int, default=config.PORT, help="HTTP port for server mode")
    args = parser.parse_args(argv)

    if args.list:
        return run_list(args.config)
    if args.run:
        return run_once(args.config, *args.run)
    run_server(args.config, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
