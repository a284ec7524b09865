from apiguard.models.sql.api_key import ApiKey
from apiguard.models.sql.application import Application
from apiguard.models.sql.user import User

__all__ = ["ApiKey", "Application", "User"]
