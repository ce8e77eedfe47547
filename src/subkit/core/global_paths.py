"""Per-user directories for subkit, resolved with platformdirs.

Nothing is created on import; callers that write (the log file sink)
create their directory on demand.
"""

import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "subkit"


class GlobalPath:
    """Global path management for subkit directories."""

    @classmethod
    def data(cls) -> str:
        """Application data directory, ``SUBKIT_DATA_DIR`` overrides."""
        return os.environ.get("SUBKIT_DATA_DIR") or user_data_dir(APP_NAME)

    @classmethod
    def log(cls) -> str:
        """Log file directory."""
        return str(Path(cls.data()) / "log")

    @classmethod
    def config(cls) -> str:
        """Configuration directory, ``SUBKIT_CONFIG_DIR`` overrides."""
        return os.environ.get("SUBKIT_CONFIG_DIR") or user_config_dir(APP_NAME)
