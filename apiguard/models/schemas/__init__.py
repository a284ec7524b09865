from apiguard.models.schemas.error import ErrorEnvelope
from apiguard.models.schemas.principal import PrincipalOut

__all__ = [
    "ErrorEnvelope",
    "PrincipalOut",
]
