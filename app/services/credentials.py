import logging
import os
from typing import Mapping, Optional

from dotenv import dotenv_values
from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import CredentialsError
from app.schemas.queries import DatabaseCredentials

logger = logging.getLogger(__name__)

PRESET_ENV_SUFFIX = "_REDSHIFT_CREDENTIALS"
PRESET_MARKER = "SAMPLE"


def load_preset_environment(env_file: str = ".env") -> dict:
    """Merge the .env file with the process environment, process wins"""
    values = {key: value for key, value in dotenv_values(env_file).items() if value is not None}
    values.update(os.environ)
    return values


class CredentialPresets:
    """Named credential sets stored as JSON under ``<ID>_REDSHIFT_CREDENTIALS``"""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = load_preset_environment() if environ is None else environ

    def get(self, preset_id: str) -> Optional[DatabaseCredentials]:
        raw = self.environ.get(f"{preset_id}{PRESET_ENV_SUFFIX}")
        if not raw:
            return None

        try:
            return DatabaseCredentials.model_validate_json(raw)
        except ValidationError:
            # Never log the payload, it holds secrets
            logger.warning(f"Credential preset {preset_id} is not valid credentials JSON")
            return None


class CredentialResolver:
    """Pick the credentials a query request should run with"""

    def __init__(self, presets: CredentialPresets, default_id: Optional[str] = None):
        self.presets = presets
        self.default_id = default_id or settings.DEFAULT_CREDENTIALS_ID

    def resolve(self, requested: Optional[DatabaseCredentials]) -> DatabaseCredentials:
        if requested is None:
            credentials = self.presets.get(self.default_id)
            if credentials is None:
                raise CredentialsError("Failed to get default sample credentials")
            return credentials

        if requested.id and PRESET_MARKER in requested.id:
            credentials = self.presets.get(requested.id)
            if credentials is None:
                raise CredentialsError(f"Failed to get sample credentials for id: {requested.id}")
            return credentials

        return requested
