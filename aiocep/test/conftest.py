import asyncio

import httpx
import pytest

APICEP_OK = {
    'status': 200,
    'code': '06233030',
    'state': 'SP',
    'city': 'Osasco',
    'district': 'Piratininga',
    'address': 'Rua Paula Rodrigues',
}

VIACEP_OK = {
    'cep': '06233-030',
    'logradouro': 'Rua Paula Rodrigues',
    'complemento': '',
    'bairro': 'Piratininga',
    'localidade': 'Osasco',
    'uf': 'SP',
    'ibge': '3534401',
    'gia': '4923',
    'ddd': '11',
    'siafi': '6789',
}


class Upstream:
    """
    A fake provider endpoint: answers after `delay` seconds and records what happened to each request.
    """

    def __init__(self, status=200, json=None, text=None, delay=0.0, error=None):
        self.status = status
        self.json = json
        self.text = text
        self.delay = delay
        self.error = error
        self.requests = []
        self.cancelled = asyncio.Event()

    async def __call__(self, request):
        self.requests.append(request)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled.set()
            raise
        if self.error is not None:
            raise self.error(self.error.__name__, request=request)
        if self.json is not None:
            return httpx.Response(self.status, json=self.json)
        return httpx.Response(self.status, text=self.text or '')


def client_factory(handler):
    transport = httpx.MockTransport(handler)
    return lambda: httpx.AsyncClient(transport=transport, timeout=5.0)


@pytest.fixture
def apicep_ok():
    return dict(APICEP_OK)


@pytest.fixture
def viacep_ok():
    return dict(VIACEP_OK)


@pytest.fixture
def upstream():
    return Upstream


@pytest.fixture
def mock_factory():
    return client_factory
