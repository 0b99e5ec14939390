#!/usr/bin/env python3
"""CLI entry point for the NIM proxy"""
import argparse
import os

import uvicorn

from nim_proxy.core.config import load_config, set_config
from nim_proxy.core.logging import setup_logging, get_logger


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description="OpenAI-compatible NVIDIA NIM proxy")
    parser.add_argument(
        "--config",
        type=str,
        default=os.environ.get("CONFIG_PATH", "config.yaml"),
        help="Path to configuration file (default: config.yaml; environment only if missing)",
    )
    args = parser.parse_args()

    config = load_config(args.config)
    set_config(config)
    # The app module reads CONFIG_PATH if it has to load config itself
    os.environ["CONFIG_PATH"] = args.config

    setup_logging(log_level=config.logging.level, log_file=config.logging.file)
    logger = get_logger()

    host = config.server.host
    port = config.server.port

    if os.path.exists(args.config):
        logger.info(f"Using config file: {args.config}")
    else:
        logger.info(f"No config file at {args.config}, using environment")
    logger.info(f"Listening on {host}:{port}")

    # Configure uvicorn to use loguru
    uvicorn.run(
        "nim_proxy.main:app",
        host=host,
        port=port,
        log_config=None,  # Disable uvicorn's default logging config
        access_log=True,  # Enable access logs (will be intercepted by loguru)
    )


if __name__ == "__main__":
    main()
