# filename: src/homefs/core/constants.py
"""
HomeFS - Remote File Explorer Server - Constants Module
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

from .utils import get_app_data_path
from .version import __app_name__

# --- Application Metadata ---
APP_NAME = __app_name__

# --- Core Application Settings ---
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

# --- File Names ---
CONFIG_FILENAME = "config.json"
LOG_FILENAME = "homefs.log"

# --- Application Paths ---
# Base directory for configuration and log files.
APP_DATA_PATH = get_app_data_path(APP_NAME)
CONFIG_FILE = APP_DATA_PATH / CONFIG_FILENAME

# --- Search Stream ---
# Pause after every emitted match so a fast walk does not flood the connection.
SEARCH_PACING_MS = 1
SEARCH_END_SENTINEL = "[DONE]"
DISCONNECT_POLL_INTERVAL = 0.1  # in seconds

# --- Transfers ---
DOWNLOAD_CHUNK_SIZE = 65536  # 64KB
UPLOAD_CHUNK_SIZE = 262144  # 256KB
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Sentinel "type" for files without an extension.
UNTYPED_FILE = "File"


def initialize_app_directories():
    """
    Creates required application directories.
    Called once at the entry point, before config or logs are written.
    """
    APP_DATA_PATH.mkdir(parents=True, exist_ok=True)
