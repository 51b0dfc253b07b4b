"""Installer for the ark-serman systemd user unit."""

import logging
import shutil
import sys
from pathlib import Path
from typing import Optional

from ..utils.constants import APP_NAME, DEFAULT_MANAGER_UNIT, SYSTEMD_USER_DIR
from .supervision_client import user_connection

logger = logging.getLogger(__name__)


class UnitInstaller:
    """Writes, enables and starts the manager's own user unit."""

    UNIT_TEMPLATE = """[Unit]
Description={app_name}: ARK Server Manager
Wants=network-online.target
After=syslog.target network.target nss-lookup.target network-online.target

[Service]
ExecStart={exec_start}
ExecStop=/bin/kill -s INT $MAINPID

[Install]
WantedBy=default.target
"""

    def __init__(self, unit_name: str = DEFAULT_MANAGER_UNIT, unit_dir: Optional[Path] = None):
        """Initialize the installer.

        Args:
            unit_name: Name of the manager unit
            unit_dir: systemd user unit directory, defaults to SYSTEMD_USER_DIR
        """
        self.unit_name = unit_name
        self.unit_dir = Path(unit_dir) if unit_dir else SYSTEMD_USER_DIR

    @property
    def unit_file(self) -> Path:
        return self.unit_dir / self.unit_name

    def is_installed(self) -> bool:
        """Check if the unit file exists."""
        return self.unit_file.exists()

    @staticmethod
    def find_executable() -> str:
        """Find the command line that starts the dashboard.

        Returns:
            The installed console script, or the current interpreter running
            the package when the script is not on PATH
        """
        script = shutil.which(APP_NAME)
        if script:
            return script
        return f"{sys.executable} -m arkserman"

    def render_unit(self, exec_start: str) -> str:
        """Render the unit file contents."""
        return self.UNIT_TEMPLATE.format(app_name=APP_NAME, exec_start=exec_start)

    def write_unit(self, exec_start: Optional[str] = None) -> Path:
        """Write the unit file, replacing any previous version.

        Returns:
            Path of the written unit file
        """
        if exec_start is None:
            exec_start = self.find_executable()
        self.unit_dir.mkdir(parents=True, exist_ok=True)
        self.unit_file.write_text(self.render_unit(exec_start))
        logger.info(f"Wrote {self.unit_file}")
        return self.unit_file

    def install(self, exec_start: Optional[str] = None, connect=user_connection) -> Path:
        """Write the unit, then reload, enable and start it.

        Errors from the supervision bus propagate to the caller.

        Returns:
            Path of the written unit file
        """
        if self.is_installed():
            logger.info(f"Reinstalling {self.unit_name} over {self.unit_file}")
        path = self.write_unit(exec_start)
        with connect() as conn:
            conn.reload()
            conn.enable_unit_files([self.unit_name])
            job = conn.start_unit(self.unit_name)
        logger.info(f"Installed and started {self.unit_name}: {job}")
        return path
