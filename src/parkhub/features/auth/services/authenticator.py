"""Credential check against the identity store."""

import logging
from typing import Optional

from ....core.exceptions import IdentityDisabledError, InvalidCredentialsError
from ....core.shared import is_missing
from ...database.entities.protocols import RelationalStore
from ...identities.repositories.identity_repository import IdentityRepository
from ..entities.caller import AuthenticatedCaller, Credentials
from ..utils.passwords import PasswordHasher

logger = logging.getLogger(__name__)


class CredentialAuthenticator:
    """Resolves email/password credentials to an enabled identity."""

    def __init__(self, store: RelationalStore, hasher: PasswordHasher):
        self._store = store
        self._hasher = hasher

    async def authenticate(self, credentials: Optional[Credentials]) -> AuthenticatedCaller:
        if credentials is None or is_missing(credentials.email) or is_missing(credentials.password):
            raise InvalidCredentialsError("Credentials are required")

        async with self._store.transaction(read_only=True) as session:
            identity = await IdentityRepository(session).find_by_email(credentials.email)

        if identity is None or not await self._hasher.verify_async(credentials.password, identity.password):
            logger.warning(f"Rejected credentials for {credentials.email}")
            raise InvalidCredentialsError("Invalid email or password")
        if not identity.enabled:
            logger.warning(f"Disabled identity {identity.id} attempted to authenticate")
            raise IdentityDisabledError(f"Identity {identity.email} is disabled")

        return AuthenticatedCaller(identity_id=identity.id, email=identity.email, role=identity.authority)
