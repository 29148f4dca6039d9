"""Settings read from the environment (and a ``.env`` file when present)"""

import os
from pathlib import Path

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).resolve().parent.parent

load_dotenv(dotenv_path=PROJECT_ROOT / '.env')


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


class Config:
    def __init__(self):
        self.google_maps_api_key = os.getenv('GOOGLE_MAPS_API_KEY')
        self.max_concurrent_requests = max(1, _int_env('MAX_CONCURRENT_REQUESTS', 10))
        self.travel_mode = os.getenv('TRAVEL_MODE', 'driving')
        self.location_prefix = os.getenv('LOCATION_PREFIX', 'Location')
        self.log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.log_file = os.getenv('LOG_FILE', 'app.log')

    @property
    def has_api_key(self) -> bool:
        return bool(self.google_maps_api_key) and self.google_maps_api_key != "your_api_key_here"
