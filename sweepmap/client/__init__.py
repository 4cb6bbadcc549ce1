"""HTTP access to a single robot."""

from .api import RobotAPIClient
from .config import RobotConfig, load_config

__all__ = ["RobotAPIClient", "RobotConfig", "load_config"]
