"""One identity backend behind the Auth Facade.

There are exactly two: the local credential store and the managed identity
provider. The facade chooses one per request from the credential origin and
never re-checks the origin afterwards.
"""

from abc import ABC, abstractmethod
from typing import Optional

from soon_auth.domain.value_objects.session_credential import Principal, SessionCredential


class ISessionBackend(ABC):
    cookie_name: str

    @abstractmethod
    async def resolve(self, credential: SessionCredential) -> Optional[Principal]:
        """Returns the principal for a credential, or None when it does not validate."""
        raise NotImplementedError

    @abstractmethod
    async def sign_out(self, principal: Principal, ip_address: Optional[str]) -> None:
        """Ends the session and records ``SIGN_OUT``. Must not raise."""
        raise NotImplementedError

    @abstractmethod
    async def end_session(self, credential: SessionCredential) -> None:
        """Invalidates the credential's backing session without any audit entry."""
        raise NotImplementedError
