"""
Identity Deprovisioning

Pluggable providers that suspend an employee's external identity (e.g. a
Google Workspace account). The active provider is configured with
settings.OFFBOARDING_IDENTITY_PROVIDER.
"""
