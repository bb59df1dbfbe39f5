"""Parse fleet.yml project configuration."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

KNOWN_FIELDS = {'environment', 'dns_serial', 'log_file'}
SERIAL_MODES = ('static', 'timestamp')
STATIC_SERIAL = '0000'


@dataclass
class ProjectConfig:
    """Provider-wide fleetc configuration from fleet.yml."""
    environment: Optional[str] = None
    dns_serial: str = 'static'
    log_file: Optional[str] = None

    @classmethod
    def load(cls, root: Path) -> 'ProjectConfig':
        """Load fleet.yml from the provider root. Returns defaults if not present."""
        config_file = root / 'fleet.yml'
        if not config_file.exists():
            return cls()

        with open(config_file, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError("fleet.yml must contain a mapping")

        unknown = set(data.keys()) - KNOWN_FIELDS
        if unknown:
            raise ValueError(f"Unknown fleet.yml field(s): {', '.join(sorted(unknown))}")

        dns_serial = data.get('dns_serial') or 'static'
        if dns_serial not in SERIAL_MODES:
            raise ValueError(
                f"dns_serial must be one of {', '.join(SERIAL_MODES)}, got {dns_serial!r}"
            )

        return cls(
            environment=data.get('environment'),
            dns_serial=dns_serial,
            log_file=data.get('log_file'),
        )

    def log_path(self, root: Path) -> Optional[Path]:
        """Absolute path of the compile log, if one is configured."""
        if not self.log_file:
            return None
        return root / self.log_file

    def zone_serial(self, now: Optional[datetime] = None) -> str:
        """SOA serial for the zone file.

        'static' keeps the fixed 0000 serial. 'timestamp' uses YYYYMMDDHH,
        which stays below 2^32.
        """
        if self.dns_serial == 'timestamp':
            return (now or datetime.now()).strftime('%Y%m%d%H')
        return STATIC_SERIAL
