"""
Rentalist Admin API Configuration

Values come from the process environment, optionally loaded from a `.env`
file at the repository root. The `NEXT_PUBLIC_*` names are still honoured so
the dashboard can share a `.env` with the public Next.js site.
"""
import logging
import os
from pathlib import Path
from dotenv import load_dotenv


def _clean_env(value: str) -> str:
    """Trim whitespace and surrounding quotes from env values."""
    if value is None:
        return ''
    value = value.strip()
    if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
        value = value[1:-1]
    return value.strip()


def _first_env(*names: str, default: str = '') -> str:
    """Return the first non-empty variable among `names`."""
    for name in names:
        value = _clean_env(os.getenv(name))
        if value:
            return value
    return default


# Load environment variables
env_path = Path(__file__).parent.parent.parent.parent / '.env'
load_dotenv(env_path)


class Config:
    """Configuration class for the Rentalist admin dashboard"""

    # Backend REST API (admin routes live under the same base)
    API_BASE_URL = _first_env('RENTALIST_API_URL', 'NEXT_PUBLIC_API_URL', default='http://localhost:4000/api')

    # Public marketplace site, used for "view on site" links
    PUBLIC_URL = _first_env('RENTALIST_PUBLIC_URL', 'NEXT_PUBLIC_PUBLIC_URL', default='http://localhost:3000')

    # Request Settings
    REQUEST_TIMEOUT = int(_first_env('RENTALIST_REQUEST_TIMEOUT', default='30'))
    DEBUG = _first_env('RENTALIST_DEBUG', default='false').lower() == 'true'
    USER_AGENT = _first_env('RENTALIST_USER_AGENT', default='rentalist-admin/1.0')

    # Storage folder sent along with image uploads
    UPLOAD_FOLDER = _first_env('RENTALIST_UPLOAD_FOLDER', default='listings')
    MAX_UPLOAD_MB = int(_first_env('RENTALIST_MAX_UPLOAD_MB', default='50'))

    # UI
    DEFAULT_LANGUAGE = _first_env('RENTALIST_DEFAULT_LANGUAGE', default='es').lower()
    SECRET_KEY = _first_env('SECRET_KEY', default='dev-secret-key-change-in-production')

    @classmethod
    def api_host(cls) -> str:
        """Base URL without the trailing `/api` segment, shown in load-error hints."""
        base = cls.API_BASE_URL.rstrip('/')
        if base.endswith('/api'):
            base = base[:-len('/api')]
        return base

    @classmethod
    def validate(cls) -> bool:
        """Validate required configuration"""
        if not cls.API_BASE_URL.startswith(('http://', 'https://')):
            print(f"Invalid RENTALIST_API_URL: {cls.API_BASE_URL!r} (expected http:// or https://)")
            return False
        return True


def configure_logging(debug: bool = None) -> None:
    """Root logging setup shared by the web app and the CLI"""
    debug = Config.DEBUG if debug is None else debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S',
    )
