# filename: src/homefs/main.py
#!/usr/bin/env python3
"""
HomeFS - Remote File Explorer Server
Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published
by the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

import argparse
import logging
import sys

import uvicorn

from .api_server.api import create_api_app
from .core import constants
from .core.config import ConfigManager
from .core.exceptions import ConfigurationError
from .core.logging_config import setup_logging
from .core.version import __app_name__, __version__


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="homefs",
        description="Browse, transfer and search a home directory over HTTP.",
    )
    parser.add_argument("--home", dest="home_path", help="Directory exposed to clients")
    parser.add_argument("--host", dest="server_host", help="Interface to bind")
    parser.add_argument("--port", dest="server_port", type=int, help="Port to listen on")
    parser.add_argument("--log-level", dest="log_level",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")
    parser.add_argument("--config", dest="config_file", help="Path to an alternative config.json")
    parser.add_argument("--version", action="version", version=f"{__app_name__} v{__version__}")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point for HomeFS."""
    args = parse_args(argv)

    constants.initialize_app_directories()
    config = ConfigManager(args.config_file)
    config.apply_overrides(
        home_path=args.home_path,
        server_host=args.server_host,
        server_port=args.server_port,
        log_level=args.log_level,
    )

    level = getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO)
    setup_logging(level)
    log = logging.getLogger(__name__)
    log.info(f"Starting {__app_name__} v{__version__}")

    try:
        home_path = config.get_home_path()
    except ConfigurationError as e:
        log.error(e.message)
        print(f"ERROR: {e.message}")
        return 1

    try:
        app = create_api_app(home_path, search_pacing=config.get_search_pacing())
        server = uvicorn.Server(uvicorn.Config(
            app=app,
            host=config.get("server_host"),
            port=int(config.get("server_port")),
            log_level="warning",
        ))
        log.info(f"Listening on http://{config.get('server_host')}:{config.get('server_port')}/")
        server.run()
        return 0
    except Exception as e:
        log.critical(f"Failed to start {__app_name__}: {e}")
        print(f"ERROR: Could not start {__app_name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
