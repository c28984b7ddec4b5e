"""
Identity providers.

Every provider implements ``suspend(employee) -> SuspensionResult``.
Business failures (no account, API refused) come back as
``SuspensionResult(ok=False, error=...)``; transport failures raise
ExternalServiceFailure.
"""
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import requests
from django.conf import settings
from django.utils.module_loading import import_string

from core.identity.exceptions import ExternalServiceFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuspensionResult:
    ok: bool
    error: Optional[str] = None

    def as_dict(self):
        data = {'ok': self.ok}
        if self.error:
            data['error'] = self.error
        return data


class IdentityProvider:
    """Base class for identity providers."""
    name = 'base'

    def suspend(self, employee) -> SuspensionResult:
        raise NotImplementedError(f"{self.__class__.__name__} must implement suspend()")


class NullIdentityProvider(IdentityProvider):
    """Used when no identity system is connected; always reports failure."""
    name = 'null'

    def suspend(self, employee) -> SuspensionResult:
        logger.info(f"No identity provider configured; cannot suspend employee {employee.pk}")
        return SuspensionResult(ok=False, error='No identity provider configured')


class GoogleWorkspaceIdentityProvider(IdentityProvider):
    """
    Suspends the employee's Google Workspace account through the Admin SDK
    Directory API (PUT users/{userKey} with {"suspended": true}).

    Settings:
        GOOGLE_WORKSPACE_API_BASE: Directory API base URL
        GOOGLE_WORKSPACE_ADMIN_TOKEN: OAuth bearer token with user admin scope
        GOOGLE_WORKSPACE_TIMEOUT: Request timeout in seconds
    """
    name = 'google_workspace'

    def __init__(self, api_base=None, token=None, timeout=None, session=None):
        self.api_base = (api_base or getattr(settings, 'GOOGLE_WORKSPACE_API_BASE', '')).rstrip('/')
        self.token = token if token is not None else getattr(settings, 'GOOGLE_WORKSPACE_ADMIN_TOKEN', '')
        self.timeout = timeout or getattr(settings, 'GOOGLE_WORKSPACE_TIMEOUT', 10)
        self.session = session or requests.Session()

    def suspend(self, employee) -> SuspensionResult:
        email = (employee.work_email or '').strip()
        if not email:
            return SuspensionResult(ok=False, error='Employee has no workspace email')
        if not self.token:
            return SuspensionResult(ok=False, error='Google Workspace admin token is not configured')

        url = f"{self.api_base}/users/{quote(email)}"
        try:
            response = self.session.put(
                url,
                json={'suspended': True},
                headers={'Authorization': f'Bearer {self.token}'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ExternalServiceFailure(f"Google Workspace request failed: {e}") from e

        if response.status_code == 404:
            return SuspensionResult(ok=False, error=f'No Google account found for {email}')
        if not response.ok:
            return SuspensionResult(
                ok=False,
                error=f'Google Workspace returned {response.status_code}: {response.text[:200]}'
            )

        logger.info(f"Suspended Google Workspace account {email} for employee {employee.pk}")
        return SuspensionResult(ok=True)


def get_identity_provider() -> IdentityProvider:
    """Instantiate the provider named by settings.OFFBOARDING_IDENTITY_PROVIDER."""
    path = getattr(
        settings,
        'OFFBOARDING_IDENTITY_PROVIDER',
        'core.identity.providers.NullIdentityProvider'
    )
    return import_string(path)()
