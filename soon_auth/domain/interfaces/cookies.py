"""Port for writing session cookies on the outgoing response."""

from abc import ABC, abstractmethod


class ISessionCookieTransport(ABC):
    """Sets and clears HTTP-only, ``SameSite=strict`` session cookies.

    The cookie attributes (``Secure``, path) are the transport's business; the
    domain only decides the name, the value and the max-age.
    """

    @abstractmethod
    def set(self, name: str, value: str, max_age: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self, name: str) -> None:
        raise NotImplementedError
