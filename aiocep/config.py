from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .providers import DEFAULT_HTTP_TIMEOUT, ApiCep, ViaCep

__all__ = ('RaceConfig', 'Seconds', 'SECONDS')

DEFAULT_APICEP_CEP = '06233-030'
DEFAULT_VIACEP_CEP = '06233030'
DEFAULT_TIMEOUT = DEFAULT_HTTP_TIMEOUT
DEFAULT_LOG_LEVEL = 'WARNING'

Seconds = Annotated[float, Field(ge=0, allow_inf_nan=False)]
"""A finite, non-negative duration. Zero is allowed and means an already expired deadline."""

SECONDS = TypeAdapter(Seconds)

PositiveSeconds = Annotated[float, Field(gt=0, allow_inf_nan=False)]


class RaceConfig(BaseModel):
    """
    Everything a lookup race needs. The two providers spell the same postal code differently, so each gets its own
    identifier.

    `http_timeout` bounds each request on its own; when `None` it follows `timeout`. Invalid values raise
    `pydantic.ValidationError`, a `ValueError`.
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    apicep_cep: str = DEFAULT_APICEP_CEP
    viacep_cep: str = DEFAULT_VIACEP_CEP
    timeout: Seconds = DEFAULT_TIMEOUT
    apicep_url: str = ApiCep.default_url
    viacep_url: str = ViaCep.default_url
    http_timeout: Optional[PositiveSeconds] = None
    log_level: str = DEFAULT_LOG_LEVEL

    def providers(self, client_factory=None):
        """
        :param client_factory: passed on to every provider, see :class:`aiocep.providers.Provider`.
        :return: the `(provider, identifier)` entries for :func:`aiocep.race.race`.
        """
        http_timeout = self.http_timeout if self.http_timeout is not None else (self.timeout or None)
        return [
            (ApiCep(self.apicep_url, http_timeout=http_timeout, client_factory=client_factory), self.apicep_cep),
            (ViaCep(self.viacep_url, http_timeout=http_timeout, client_factory=client_factory), self.viacep_cep),
        ]
