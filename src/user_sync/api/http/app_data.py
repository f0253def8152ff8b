from dataclasses import dataclass

from src.user_sync.core.services import DbSessionService


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
