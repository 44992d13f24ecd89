"""Auth services."""

from .authenticator import CredentialAuthenticator
from .authorization_interceptor import AuthorizationInterceptor

__all__ = ["CredentialAuthenticator", "AuthorizationInterceptor"]
