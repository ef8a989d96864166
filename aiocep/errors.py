class CepError(Exception):
    """Base exception for postal code lookups."""


class FetchError(CepError):
    """
    A single provider lookup failed. Never escapes the fetcher that raised it: the race only learns that the
    provider did not finish.
    """

    def __init__(self, message, provider=None):
        super().__init__(message)
        self.provider = provider


class TransportError(FetchError):
    """Connection, DNS, TLS or protocol failure while talking to a provider."""


class RemoteError(FetchError):
    """The provider answered with a status in the 400-599 range. The message is the raw response body."""

    def __init__(self, status, body, provider=None):
        super().__init__(body, provider)
        self.status = status
        self.body = body


class DecodeError(FetchError):
    """The provider's response body does not match its record shape."""


class CancellationError(FetchError):
    """The cancellation scope was revoked (or expired) while the lookup was in flight."""


class EncodeError(CepError):
    """A winning record could not be serialized. Fatal: it means a record was built with bad field values."""
