"""Record shapes returned by the postal code providers."""

import dataclasses
import json

from .errors import DecodeError, EncodeError

__all__ = ('ApiCepRecord', 'ViaCepRecord', 'decode', 'encode')


@dataclasses.dataclass(frozen=True)
class ApiCepRecord:
    status: int = 0
    code: str = ''
    state: str = ''
    city: str = ''
    district: str = ''
    address: str = ''


@dataclasses.dataclass(frozen=True)
class ViaCepRecord:
    cep: str = ''
    logradouro: str = ''
    complemento: str = ''
    bairro: str = ''
    localidade: str = ''
    uf: str = ''
    ibge: str = ''
    gia: str = ''
    ddd: str = ''
    siafi: str = ''


def decode(record_type, body, provider=None):
    """
    Decode a JSON response body into `record_type`.

    Missing (or null) fields keep their zero value and unknown fields are ignored, and a `null` body gives the zero
    record. A body that is neither an object nor `null`, or a field holding the wrong JSON type, raises
    :class:`aiocep.errors.DecodeError`.
    """
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise DecodeError('invalid json: ' + str(exc), provider) from exc

    # a null document leaves every field at its zero value
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise DecodeError('expected a json object, got ' + type(payload).__name__, provider)

    values = {}
    for field in dataclasses.fields(record_type):
        value = payload.get(field.name)
        if value is None:
            continue
        # bool is an int subclass but never a valid json number here
        if not isinstance(value, field.type) or isinstance(value, bool):
            raise DecodeError('field %r: expected %s, got %s'
                              % (field.name, field.type.__name__, type(value).__name__), provider)
        values[field.name] = value
    return record_type(**values)


def encode(record):
    """
    Serialize a record to compact JSON, keys in field order.

    :raises aiocep.errors.EncodeError: if the record cannot be represented as JSON.
    """
    try:
        return json.dumps(dataclasses.asdict(record), ensure_ascii=False, allow_nan=False, separators=(',', ':'))
    except (TypeError, ValueError) as exc:
        raise EncodeError(str(exc)) from exc
