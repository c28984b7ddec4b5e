"""
Tests for identity providers.
"""
from unittest.mock import Mock

import requests
from django.test import SimpleTestCase, override_settings

from core.identity.exceptions import ExternalServiceFailure
from core.identity.providers import (
    GoogleWorkspaceIdentityProvider,
    NullIdentityProvider,
    get_identity_provider,
)
from HR.person.models import Employee


def _response(status_code, text=''):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    return response


class GoogleWorkspaceIdentityProviderTest(SimpleTestCase):

    def setUp(self):
        self.session = Mock()
        self.provider = GoogleWorkspaceIdentityProvider(
            api_base='https://admin.example.com/directory/v1/',
            token='secret',
            timeout=5,
            session=self.session,
        )
        self.employee = Employee(pk=3, work_email='jane.doe@example.com')

    def test_suspend_success(self):
        self.session.put.return_value = _response(200)

        result = self.provider.suspend(self.employee)

        self.assertTrue(result.ok)
        args, kwargs = self.session.put.call_args
        self.assertEqual(args[0], 'https://admin.example.com/directory/v1/users/jane.doe%40example.com')
        self.assertEqual(kwargs['json'], {'suspended': True})
        self.assertEqual(kwargs['headers'], {'Authorization': 'Bearer secret'})
        self.assertEqual(kwargs['timeout'], 5)

    def test_unknown_account(self):
        self.session.put.return_value = _response(404)
        result = self.provider.suspend(self.employee)
        self.assertFalse(result.ok)
        self.assertIn('No Google account', result.error)

    def test_api_error(self):
        self.session.put.return_value = _response(500, 'backend error')
        result = self.provider.suspend(self.employee)
        self.assertFalse(result.ok)
        self.assertEqual(result.as_dict(), {'ok': False, 'error': 'Google Workspace returned 500: backend error'})

    def test_transport_failure_raises(self):
        self.session.put.side_effect = requests.ConnectionError('refused')
        with self.assertRaises(ExternalServiceFailure):
            self.provider.suspend(self.employee)

    def test_missing_token(self):
        provider = GoogleWorkspaceIdentityProvider(token='', session=self.session)
        result = provider.suspend(self.employee)
        self.assertFalse(result.ok)
        self.session.put.assert_not_called()

    def test_missing_email(self):
        result = self.provider.suspend(Employee(pk=4, work_email=''))
        self.assertEqual(result.error, 'Employee has no workspace email')


class ProviderLookupTest(SimpleTestCase):

    def test_null_provider(self):
        result = NullIdentityProvider().suspend(Employee(pk=1))
        self.assertFalse(result.ok)

    @override_settings(OFFBOARDING_IDENTITY_PROVIDER='core.identity.providers.GoogleWorkspaceIdentityProvider')
    def test_configured_provider(self):
        self.assertIsInstance(get_identity_provider(), GoogleWorkspaceIdentityProvider)

    @override_settings(OFFBOARDING_IDENTITY_PROVIDER='core.identity.providers.NullIdentityProvider')
    def test_default_provider(self):
        self.assertIsInstance(get_identity_provider(), NullIdentityProvider)
