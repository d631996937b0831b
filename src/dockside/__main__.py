from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from textual.logging import TextualHandler

from dockside.engine.client import DockerVolumeClient, VolumeClient, demo_client
from dockside.engine.config import Config, ConfigError, load_config
from dockside.ui.app import DocksideApp


def configure_logging(config: Config) -> None:
    # The app owns the terminal, so never log to stderr.
    if config.log_file is not None:
        logging.basicConfig(
            filename=config.log_file,
            level=config.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.basicConfig(level=config.log_level, handlers=[TextualHandler()])


def build_client(config: Config, demo: bool) -> VolumeClient:
    if demo:
        return demo_client()
    return DockerVolumeClient(base_url=config.docker_base_url, timeout=config.docker_timeout)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="dockside",
        description="Browse and remove container runtime volumes.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file.")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use built-in sample volumes instead of the Docker daemon.",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    configure_logging(config)
    client = build_client(config, args.demo)
    try:
        DocksideApp(client, config).run()
    finally:
        if isinstance(client, DockerVolumeClient):
            client.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
