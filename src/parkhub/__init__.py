"""parkhub - entity service layer for identities, cars, addresses and parking lots.

The public entry points are the lifecycle container and the service facade:

    async with ParkhubContainer.from_settings() as container:
        result = await container.service.execute(Operation.CAR_FIND_BY_ID, credentials, {"car_id": car_id})
"""

from .__version__ import __version__
from .container import ParkhubContainer
from .service import ParkhubService
from .features.auth.entities.policies import Operation
from .features.auth.entities.caller import Credentials

__all__ = [
    "__version__",
    "ParkhubContainer",
    "ParkhubService",
    "Operation",
    "Credentials",
]
