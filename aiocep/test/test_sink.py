import io

import pytest

from aiocep import Success, Timeout
from aiocep.errors import EncodeError
from aiocep.records import ApiCepRecord, ViaCepRecord
from aiocep.sink import render


def test_render_success(apicep_ok):
    out = io.StringIO()
    err = io.StringIO()

    assert render(Success('apicep', ApiCepRecord(**apicep_ok)), out, err) == 1

    assert out.getvalue() == (
        "response received from the 'apicep' api. Response data: "
        '{"status":200,"code":"06233030","state":"SP","city":"Osasco","district":"Piratininga",'
        '"address":"Rua Paula Rodrigues"}\n')
    assert err.getvalue() == ''


def test_render_timeout():
    out = io.StringIO()
    err = io.StringIO()

    assert render(Timeout(1.0), out, err) == 0

    assert out.getvalue() == ''
    assert err.getvalue() == 'no cep api responded within 1s\n'


def test_render_fractional_timeout():
    err = io.StringIO()
    render(Timeout(0.25), err=err)
    assert err.getvalue() == 'no cep api responded within 0.25s\n'


def test_render_unencodable_record_is_fatal():
    out = io.StringIO()
    with pytest.raises(EncodeError):
        render(Success('viacep', ViaCepRecord(cep=float('inf'))), out)
    assert out.getvalue() == ''


def test_render_rejects_other_values():
    with pytest.raises(TypeError):
        render(None)
