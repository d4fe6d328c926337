#!/usr/bin/env python3
"""Guess Master server: load config and state, then serve the event webhook."""

from __future__ import annotations

import argparse
import sys

from guess_master import log
from guess_master.config import CONFIG_FILE, ConfigError, load_config
from guess_master.dispatcher import GuessDispatcher
from guess_master.games import SessionStore
from guess_master.log import clean_log
from guess_master.messages import MessageCatalog
from guess_master.persistence import PersistenceStore
from guess_master.webhook import create_app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the Guess Master game server.")
    parser.add_argument("--config", default=CONFIG_FILE, help="Path to config.json (default: %(default)s)")
    parser.add_argument("--host", default="0.0.0.0", help="Interface for the HTTP listener")
    parser.add_argument("--port", type=int, default=None, help="Override web_port from config")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"❌ {exc}")
        return 2

    log.configure(debug=config.debug, clean_logs=config.clean_logs)
    clean_log("Starting GUESS-MASTER server...", "🚀", show_always=True)

    persistence = PersistenceStore(config.data_dir, clean_log=clean_log)
    store = SessionStore(config, persistence, clean_log=clean_log)
    catalog = MessageCatalog.from_directory(config.messages_dir, config.default_language, clean_log=clean_log)
    dispatcher = GuessDispatcher(store, available_languages=catalog.languages(), clean_log=clean_log)
    app = create_app(dispatcher, catalog, clean_log=clean_log)

    port = args.port or config.web_port
    clean_log(
        f"Range {config.min}..{config.max}, {config.attempts} attempts, reset after {config.restart_threshold} losses",
        "🎯",
        show_always=True,
    )
    clean_log(f"Launching Flask web interface on port {port}...", "🌐", show_always=True)
    try:
        app.run(host=args.host, port=port, debug=False, threaded=True)
    except KeyboardInterrupt:
        print("User interrupted the script. Exiting.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
