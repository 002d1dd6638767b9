"""
Snapshot of the host facts written to the report's environment element.
"""

import getpass
import logging
import os
import platform
import socket
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _current_user() -> str:
    """Return the login name, or an empty string when it cannot be determined."""
    try:
        return getpass.getuser()
    except (KeyError, OSError) as e:
        # getpass falls back to the password database, which may not know
        # the uid inside containers.
        logger.debug("Unable to determine current user: %s", e)
        return ""


@dataclass(frozen=True)
class HostEnvironment:
    """Host platform details captured once per report."""

    platform: str
    os_version: str
    cwd: str
    machine_name: str
    user: str
    user_domain: str

    @classmethod
    def capture(cls) -> "HostEnvironment":
        """Read the details of the host running the reporter."""
        machine_name = socket.gethostname()
        return cls(
            platform=platform.system().lower(),
            os_version=platform.release(),
            cwd=os.getcwd(),
            machine_name=machine_name,
            user=_current_user(),
            user_domain=os.environ.get("USERDOMAIN", machine_name),
        )
