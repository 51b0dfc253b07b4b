"""ark-serman - manage Ark dedicated servers running as systemd user units."""

from .utils.constants import APP_VERSION

__version__ = APP_VERSION
