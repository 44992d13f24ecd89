"""Interceptor decision."""

from dataclasses import dataclass
from typing import Any, Optional

from ....core.exceptions import ParkhubError
from .caller import AuthenticatedCaller


@dataclass(frozen=True)
class AccessDecision:
    """Allowed (with the caller and parsed payload) or denied (with the error)."""

    caller: Optional[AuthenticatedCaller] = None
    payload: Any = None
    error: Optional[ParkhubError] = None

    @classmethod
    def allow(cls, caller: Optional[AuthenticatedCaller], payload: Any = None) -> "AccessDecision":
        return cls(caller=caller, payload=payload)

    @classmethod
    def deny(cls, error: ParkhubError) -> "AccessDecision":
        return cls(error=error)

    @property
    def allowed(self) -> bool:
        return self.error is None
