"""
config.py
Configuration management for the Restaurant Discovery Engine
"""

import os
import logging
from datetime import date
from typing import Dict, List, Optional, Set
from pathlib import Path

logger = logging.getLogger(__name__)

# Taiwan public holidays used when DISCOVERY_HOLIDAYS is not set
DEFAULT_HOLIDAYS = [
    "2024-01-01",
    "2024-02-08", "2024-02-09", "2024-02-10", "2024-02-11",
    "2024-02-12", "2024-02-13", "2024-02-14",
    "2024-04-04", "2024-04-05",
    "2024-06-10",
    "2024-09-17",
    "2024-10-10",
    "2025-01-01",
    "2025-01-28", "2025-01-29", "2025-01-30", "2025-01-31", "2025-02-01",
]

DEFAULT_SAMPLE_DATA = Path(__file__).resolve().parent / "data" / "taichung_restaurants.csv"


class Config:
    """Configuration management for the system"""

    def __init__(self):
        self._env_file_values = self._load_env_file()
        self.default_limit = self._get_int('DISCOVERY_DEFAULT_LIMIT', 20)
        self.default_radius_km = self._get_float('DISCOVERY_DEFAULT_RADIUS_KM', 5.0)
        self.sample_data_path = self._get('DISCOVERY_SAMPLE_DATA') or str(DEFAULT_SAMPLE_DATA)
        self.log_level = (self._get('DISCOVERY_LOG_LEVEL') or 'INFO').upper()
        self.holidays = self._get_holidays()

    def _get(self, name: str) -> Optional[str]:
        """Environment variable first, then the .env file"""
        value = os.getenv(name)
        if value:
            return value.strip()
        return self._env_file_values.get(name)

    def _get_int(self, name: str, default: int) -> int:
        raw = self._get(name)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            logger.warning(f"Invalid integer for {name}: {raw!r}, using {default}")
            return default

    def _get_float(self, name: str, default: float) -> float:
        raw = self._get(name)
        if raw is None:
            return default
        try:
            return float(raw)
        except ValueError:
            logger.warning(f"Invalid number for {name}: {raw!r}, using {default}")
            return default

    def _get_holidays(self) -> Set[date]:
        raw = self._get('DISCOVERY_HOLIDAYS')
        if not raw:
            return {date.fromisoformat(d) for d in DEFAULT_HOLIDAYS}

        holidays = set()
        for item in raw.split(','):
            item = item.strip()
            if not item:
                continue
            try:
                holidays.add(date.fromisoformat(item))
            except ValueError:
                logger.warning(f"Ignoring malformed holiday date: {item!r}")
        logger.info(f"Loaded {len(holidays)} holidays from DISCOVERY_HOLIDAYS")
        return holidays

    def _load_env_file(self) -> Dict[str, str]:
        """Load DISCOVERY_* settings from a .env file in the working directory"""
        env_file = Path('.env')
        if not env_file.exists():
            return {}

        values = {}
        try:
            with open(env_file, 'r', encoding='utf-8') as f:
                for line in f:
                    line = line.strip()
                    if not line.startswith('DISCOVERY_') or '=' not in line:
                        continue
                    key, value = line.split('=', 1)
                    value = value.strip()
                    # Remove quotes if present
                    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                        value = value[1:-1]
                    if value:
                        values[key.strip()] = value
        except OSError as e:
            logger.warning(f"Error reading .env file: {e}")

        return values

    def get_holidays(self) -> Set[date]:
        """Copy of the configured holiday calendar"""
        return set(self.holidays)

    def get_sample_data_path(self) -> str:
        return self.sample_data_path

    def describe(self) -> List[str]:
        return [
            f"default limit: {self.default_limit}",
            f"default radius: {self.default_radius_km} km",
            f"holidays: {len(self.holidays)}",
            f"sample data: {self.sample_data_path}",
        ]

# Global configuration instance
config = Config()
