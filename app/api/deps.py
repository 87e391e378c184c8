from functools import lru_cache

from fastapi import Depends

from app.services.chat import ChatService
from app.services.credentials import CredentialPresets, CredentialResolver
from app.services.postgres import PostgresQueryService
from app.services.redshift import RedshiftQueryService


@lru_cache()
def get_credential_presets() -> CredentialPresets:
    """Get the process-wide credential presets, loaded once"""
    return CredentialPresets()


def get_credential_resolver(
    presets: CredentialPresets = Depends(get_credential_presets),
) -> CredentialResolver:
    return CredentialResolver(presets)


def get_redshift_service() -> RedshiftQueryService:
    return RedshiftQueryService()


def get_postgres_service() -> PostgresQueryService:
    return PostgresQueryService()


def get_chat_service() -> ChatService:
    return ChatService()
