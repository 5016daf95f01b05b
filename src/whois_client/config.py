"""
WHOIS Client Configuration

Handles configuration loading and management.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

from whois_client.connection import DEFAULT_TIMEOUT, WHOIS_PORT

logger = logging.getLogger("whois.config")


# Default config locations
DEFAULT_CONFIG_PATHS = [
    Path("/etc/whois-client/client.yaml"),
    Path("/etc/whois-client/client.yml"),
    Path.home() / ".whois-client" / "client.yaml",
    Path("whois_config.yaml"),
]


@dataclass
class ServerConfig:
    """Transport settings shared by all WHOIS servers."""
    port: int = WHOIS_PORT
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class WhoisConfig:
    """Complete client configuration."""
    server: ServerConfig = field(default_factory=ServerConfig)
    servers: Dict[str, str] = field(default_factory=dict)  # TLD -> hostname
    profile: str = "default"

    @classmethod
    def from_dict(cls, data: dict, profile: str = "default") -> "WhoisConfig":
        """
        Create config from dictionary.

        Args:
            data: Configuration dictionary
            profile: Profile name to use

        Returns:
            WhoisConfig instance

        Raises:
            ValueError: If a value has the wrong type or range
        """
        # Get profile-specific config or use root
        profiles = data.get("profiles") or {}
        if profile in profiles:
            profile_data = profiles[profile] or {}
        else:
            profile_data = data

        server_data = profile_data.get("server") or {}
        timeout = float(server_data.get("timeout", DEFAULT_TIMEOUT))
        if timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout}")

        server = ServerConfig(
            port=int(server_data.get("port", WHOIS_PORT)),
            timeout=timeout,
        )

        # Servers file first, inline entries override it
        servers: Dict[str, str] = {}
        servers_file = _expand_path(profile_data.get("servers_file"))
        if servers_file:
            servers.update(_normalize_servers(_load_mapping(Path(servers_file))))
        servers.update(_normalize_servers(profile_data.get("servers") or {}))

        return cls(server=server, servers=servers, profile=profile)

    @classmethod
    def from_file(cls, path: Path, profile: str = "default") -> "WhoisConfig":
        """
        Load config from YAML file.

        Args:
            path: Path to config file
            profile: Profile name to use

        Returns:
            WhoisConfig instance
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        logger.debug("Loaded configuration from %s", path)
        return cls.from_dict(data or {}, profile)

    @classmethod
    def find_and_load(cls, profile: str = "default") -> Optional["WhoisConfig"]:
        """
        Find and load config from default locations.

        Args:
            profile: Profile name to use

        Returns:
            WhoisConfig instance or None if not found
        """
        for path in DEFAULT_CONFIG_PATHS:
            if path.exists():
                return cls.from_file(path, profile)
        return None


def _expand_path(path: Optional[str]) -> Optional[str]:
    """Expand environment variables and ~ in path."""
    if path is None:
        return None
    return os.path.expandvars(os.path.expanduser(path))


def _load_mapping(path: Path) -> dict:
    """Load a TLD mapping file; JSON documents parse as YAML."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _normalize_servers(servers) -> Dict[str, str]:
    if not isinstance(servers, dict):
        raise ValueError(f"Server mapping must be a mapping of TLD to hostname, got {type(servers).__name__}")
    return {
        str(tld).strip().lstrip(".").lower(): str(host).strip()
        for tld, host in servers.items()
        if host
    }


def create_sample_config() -> str:
    """
    Generate sample configuration YAML.

    Returns:
        Sample config as YAML string
    """
    return """# WHOIS Client Configuration
# Default location: /etc/whois-client/client.yaml
# Alternative: ~/.whois-client/client.yaml (user install)

server:
  port: 43
  timeout: 30        # seconds until the server must close the connection

# TLD -> WHOIS server mapping (optional)
# servers_file may point to a YAML or JSON mapping; inline entries win.
# servers_file: ~/.whois-client/servers.json
servers:
  jp: whois.jprs.jp
  kr: whois.kr
  de: whois.denic.de
  gg: whois.gg

# Multiple profiles example (optional)
profiles:
  slow-registries:
    server:
      timeout: 60
    servers:
      ru: whois.tcinet.ru
"""
