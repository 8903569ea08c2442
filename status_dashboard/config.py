import os
from dataclasses import dataclass
from typing import Optional

STATUS_FILE_NAME = "status.json"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5001


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class DashboardConfig:
    base_dir: str
    secret: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_file: Optional[str] = None

    @property
    def status_path(self):
        return os.path.join(self.base_dir, STATUS_FILE_NAME)


def default_base_dir(env):
    # Same fallback as the snapshot producer: $HOME/clawd
    return os.path.join(env.get("HOME", ""), "clawd")


def load_config(env=None):
    """Build a DashboardConfig from an environment mapping (os.environ by default)."""
    if env is None:
        env = os.environ

    base_dir = env.get("CLAWD_DIR") or default_base_dir(env)
    port = env.get("DASHBOARD_PORT")
    if port and not port.isdigit():
        raise ConfigError(f"DASHBOARD_PORT must be a port number, got {port!r}")

    return DashboardConfig(
        base_dir=os.path.abspath(os.path.expanduser(base_dir)),
        secret=env.get("DASHBOARD_SECRET") or None,
        host=env.get("DASHBOARD_HOST") or DEFAULT_HOST,
        port=int(port) if port else DEFAULT_PORT,
        log_file=env.get("DASHBOARD_LOG_FILE") or None,
    )
