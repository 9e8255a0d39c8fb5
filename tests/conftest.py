"""Shared fixtures for the Keystone Login test suite."""

import copy

import pytest

from keystone_login.auth.models import Identity


ACCESS_DOCUMENT = {
    "access": {
        "token": {
            "id": "token-123",
            "expires": "2030-01-01T12:00:00.000Z",
            "tenant": {"id": "tenant-1", "name": "acme"}
        },
        "user": {
            "id": "user-1",
            "name": "bob",
            "roles": [{"name": "identity:default"}]
        },
        "serviceCatalog": [
            {
                "name": "cloudFiles",
                "type": "object-store",
                "endpoints": [
                    {
                        "region": "DFW",
                        "publicURL": "https://dfw.files.example.com/v1/acme",
                        "internalURL": "https://snet-dfw.files.example.com/v1/acme"
                    },
                    {
                        "region": "ORD",
                        "publicURL": "https://ord.files.example.com/v1/acme"
                    }
                ]
            },
            {
                "name": "identity",
                "type": "identity",
                "endpoints": [
                    {"publicURL": "https://identity.example.com/v2.0"}
                ]
            }
        ]
    }
}


class StubIdentityClient:
    """Identity client that answers from memory."""

    def __init__(self, context, identity=None, error=None):
        self.context = context
        self.identity = None
        self.closed = False
        self._identity = identity
        self._error = error

    async def auth(self):
        if self._error is not None:
            raise self._error
        self.identity = self._identity
        return self.identity

    async def close(self):
        self.closed = True


class StubClientFactory:
    """Builds StubIdentityClients and remembers every one it built."""

    def __init__(self, identity=None, error=None):
        self.identity = identity
        self.error = error
        self.clients = []

    def __call__(self, context):
        client = StubIdentityClient(context, self.identity, self.error)
        self.clients.append(client)
        return client


@pytest.fixture
def access_document():
    """Keystone v2.0 token response body."""
    return copy.deepcopy(ACCESS_DOCUMENT)


@pytest.fixture
def identity(access_document):
    """Identity parsed from the sample token response."""
    return Identity.from_response(access_document)


@pytest.fixture
def client_factory():
    """Factory for stub identity client factories."""
    return StubClientFactory
