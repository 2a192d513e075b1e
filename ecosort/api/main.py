from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from .config_loader import load_config, resolve_credentials
from .server import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecosort-api",
        description="Serve the EcoSort waste classification API.",
        epilog="Roboflow credentials are read from the environment (or .env); "
               "the variable names are set in the inference section of the config.",
    )
    parser.add_argument("--config", default="config/ecosort.json", help="JSON settings file")
    parser.add_argument("--host", help="bind address; overrides server.host")
    parser.add_argument("--port", type=int, help="listen port; overrides server.port")
    return parser


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s"
        )
    args = build_parser().parse_args(argv)

    config_path = Path(args.config)
    if not config_path.exists():
        logger.info(
            "Configuration file %s not found; using defaults. "
            "Copy config/ecosort.example.json to config/ecosort.json",
            config_path,
        )
    try:
        cfg = load_config(config_path if config_path.exists() else None)
    except Exception as exc:
        logger.error("Failed to load configuration: %s", exc)
        sys.exit(1)

    if args.host:
        cfg.server.host = args.host
    if args.port:
        cfg.server.port = args.port

    credentials = resolve_credentials(cfg.inference)
    logger.info("Server configuration: %s:%d", cfg.server.host, cfg.server.port)
    logger.info(
        "Inference endpoint base=%s model=%s version=%s threshold=%.2f",
        cfg.inference.base_url,
        credentials.model or "<unset>",
        credentials.version or "<unset>",
        cfg.inference.confidence_threshold,
    )

    app = create_app(cfg, credentials=credentials)
    uvicorn.run(app, host=cfg.server.host, port=cfg.server.port, log_level="info")


if __name__ == "__main__":
    main()
