"""Settings loaded from the environment (and a .env file if present)."""

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

from .api_client import DEFAULT_API_URL
from .errors import ConfigurationError
from .exclusions import DEFAULT_EXCLUSIONS_FILE
from .snapshot import DEFAULT_SNAPSHOT_FILE

REQUIRED_VARIABLES = ('GITHUB_OWNER', 'GITHUB_REPO', 'GITHUB_TOKEN')


@dataclass
class Settings:
    owner: str
    repo: str
    token: str
    data_dir: str = '.'
    snapshot_file: str = DEFAULT_SNAPSHOT_FILE
    exclusions_file: str = DEFAULT_EXCLUSIONS_FILE
    api_url: str = DEFAULT_API_URL
    log_level: str = 'INFO'


def load_settings(environ: Mapping[str, str] = None) -> Settings:
    """Read settings, failing fast when a required variable is missing.

    Args:
        environ: Variables to read; defaults to os.environ after loading .env

    Returns:
        Settings for the dashboard

    Raises:
        ConfigurationError: If GITHUB_OWNER, GITHUB_REPO or GITHUB_TOKEN is unset
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    for variable in REQUIRED_VARIABLES:
        if not environ.get(variable, '').strip():
            raise ConfigurationError(variable)

    return Settings(
        owner=environ['GITHUB_OWNER'].strip(),
        repo=environ['GITHUB_REPO'].strip(),
        token=environ['GITHUB_TOKEN'].strip(),
        data_dir=environ.get('DATA_DIR', '.').strip() or '.',
        snapshot_file=environ.get('SNAPSHOT_FILE', DEFAULT_SNAPSHOT_FILE).strip() or DEFAULT_SNAPSHOT_FILE,
        exclusions_file=environ.get('EXCLUSIONS_FILE', DEFAULT_EXCLUSIONS_FILE).strip() or DEFAULT_EXCLUSIONS_FILE,
        api_url=environ.get('GITHUB_API_URL', DEFAULT_API_URL).strip() or DEFAULT_API_URL,
        log_level=environ.get('LOG_LEVEL', 'INFO').strip().upper() or 'INFO',
    )
