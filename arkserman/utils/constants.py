"""Application constants and configuration."""

from pathlib import Path

# Application metadata
APP_NAME = "ark-serman"
APP_TITLE = "Ark Dedicated Server Manager"
APP_VERSION = "1.0.0"

# Paths
CONFIG_DIR = Path.home() / ".config" / "ark-serman"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
LOG_FILE = CONFIG_DIR / "ark-serman.log"
SYSTEMD_USER_DIR = Path.home() / ".config" / "systemd" / "user"

# Application resources
WEB_DIR = Path(__file__).parent.parent / "web"
TEMPLATES_DIR = WEB_DIR / "templates"
STATIC_DIR = WEB_DIR / "static"
ROOT_TEMPLATE = "root.html"
FAVICON = "ark.svg"

# Default settings
DEFAULT_BIND = ":8070"
DEFAULT_UNIT_PATTERN = "ark-*"
DEFAULT_MANAGER_UNIT = "ark-serman.service"
DEFAULT_DISPLAY_PREFIX = "ark-"
DEFAULT_DISPLAY_SUFFIX = ".service"
DEFAULT_RCON_TIMEOUT = 10  # seconds

# systemd D-Bus names
SYSTEMD_BUS_NAME = "org.freedesktop.systemd1"
SYSTEMD_OBJECT_PATH = "/org/freedesktop/systemd1"
JOB_MODE_REPLACE = "replace"

# systemd reports unset accounting counters as UINT64_MAX
UINT64_MAX = 2 ** 64 - 1

# Status colors for the dashboard state column
STATUS_COLORS = {
    "active": "#2ecc71",        # Green
    "inactive": "#95a5a6",      # Gray
    "failed": "#e74c3c",        # Red
    "activating": "#f1c40f",    # Yellow
    "deactivating": "#f1c40f",  # Yellow
    "reloading": "#f1c40f",     # Yellow
    "unknown": "#95a5a6"        # Gray
}
