import abc
import logging

import httpx

from .errors import CancellationError, FetchError, RemoteError, TransportError
from .records import ApiCepRecord, ViaCepRecord, decode

__all__ = ('Provider', 'ApiCep', 'ViaCep')

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 1.0


class Provider(abc.ABC):
    """
    A postal code lookup service. Subclasses name the provider, its record type and how an identifier is placed
    into its URL.

    :param base_url: the provider's base address. If `None`, the subclass default is used.
    :param http_timeout: timeout in seconds applied by the HTTP client to each request. Defaults to one second,
                         the same as the default race timeout.
    :param client_factory: a callable returning a fresh `httpx.AsyncClient`, mainly for tests. If `None`, a client
                           following redirects with `http_timeout` is created for each lookup.
    """

    name = None
    record_type = None
    default_url = None

    def __init__(self, base_url=None, *, http_timeout=DEFAULT_HTTP_TIMEOUT, client_factory=None):
        self.base_url = (base_url or self.default_url).rstrip('/')
        self._http_timeout = http_timeout
        self._client_factory = client_factory

    def __repr__(self):
        return self.__class__.__name__ + '<' + self.base_url + '>'

    @abc.abstractmethod
    def url_for(self, identifier):
        """
        :return: the lookup URL for `identifier`, which is inserted as-is.
        """

    def _new_client(self):
        if self._client_factory is not None:
            return self._client_factory()
        return httpx.AsyncClient(timeout=self._http_timeout, follow_redirects=True)

    async def _get(self, url):
        try:
            async with self._new_client() as client:
                return await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(str(exc) or exc.__class__.__name__, self.name) from exc

    async def fetch(self, identifier, scope):
        """
        **Coroutine**. Look `identifier` up, issuing exactly one request bound to `scope`.

        :return: an instance of :attr:`record_type`.
        :raises aiocep.errors.FetchError: :class:`~aiocep.errors.TransportError`,
                :class:`~aiocep.errors.RemoteError`, :class:`~aiocep.errors.DecodeError` or
                :class:`~aiocep.errors.CancellationError`.
        """
        url = self.url_for(identifier)
        try:
            response = await scope.run(self._get(url))
        except CancellationError as exc:
            exc.provider = self.name
            raise
        if 400 <= response.status_code <= 599:
            raise RemoteError(response.status_code, response.text, self.name)
        return decode(self.record_type, response.content, self.name)

    async def fetch_into(self, identifier, scope, slot):
        """
        **Coroutine**. Run :meth:`fetch` and put the record into `slot` on success.

        Failures stop here: they are logged and nothing is put, so the party reading `slot` only ever sees
        successes.

        :return: `True` if a record was put into `slot`.
        """
        try:
            record = await self.fetch(identifier, scope)
        except CancellationError as exc:
            logger.debug('lookup on %r abandoned: %s', self.name, exc)
            return False
        except FetchError as exc:
            logger.warning("unable to get the cep data from '%s': %s", self.name, exc)
            return False
        logger.debug('lookup on %r succeeded', self.name)
        return await slot.put(record)


class ApiCep(Provider):
    name = 'apicep'
    record_type = ApiCepRecord
    default_url = 'https://cdn.apicep.com/file/apicep'

    def url_for(self, identifier):
        return self.base_url + '/' + identifier + '.json'


class ViaCep(Provider):
    name = 'viacep'
    record_type = ViaCepRecord
    default_url = 'http://viacep.com.br/ws'

    def url_for(self, identifier):
        return self.base_url + '/' + identifier + '/json'
