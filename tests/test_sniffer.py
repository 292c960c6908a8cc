"""Test :mod:`rnxcodec.sniffer`

"""
# Standard library imports
import gzip

# External library imports
import pytest

# rnxcodec imports
from rnxcodec import binex
from rnxcodec import crinex
from rnxcodec import sniffer
from rnxcodec.binex.message import Message
from rnxcodec.lib import exceptions
from rnxcodec.lib.enums import FileFormat


@pytest.fixture
def binex_data():
    return binex.write_message(Message.new(0x7F, b"payload", True, False, False))


@pytest.mark.quick
def test_sniff(rinex3_text, binex_data):
    rinex_data = rinex3_text.encode("ascii")
    crinex_data = crinex.compress(rinex_data)

    assert sniffer.sniff(rinex_data) == (FileFormat.rinex, False)
    assert sniffer.sniff(crinex_data) == (FileFormat.crinex, False)
    assert sniffer.sniff(binex_data) == (FileFormat.binex, False)
    assert sniffer.sniff(gzip.compress(crinex_data)) == (FileFormat.crinex, True)
    assert sniffer.sniff(b"Hello world\n") == (FileFormat.unknown, False)
    assert sniffer.sniff(b"") == (FileFormat.unknown, False)


@pytest.mark.quick
def test_decode_dispatch(rinex3_text, binex_data):
    rinex_data = rinex3_text.encode("ascii")
    record = sniffer.decode(rinex_data)

    assert sniffer.decode(crinex.compress(rinex_data)) == record
    assert sniffer.decode(gzip.compress(rinex_data)) == record
    messages, errors = sniffer.decode(binex_data)
    assert [m.payload for m in messages] == [b"payload"]
    assert errors == []


@pytest.mark.quick
def test_decode_unknown():
    with pytest.raises(exceptions.FormatError):
        sniffer.decode(b"Hello world\n")


@pytest.mark.quick
def test_decode_bad_gzip():
    with pytest.raises(exceptions.FormatError):
        sniffer.decode(b"\x1f\x8b\x08\x00broken")


@pytest.mark.quick
def test_encode(rinex3_text):
    record = sniffer.decode(rinex3_text.encode("ascii"))

    assert sniffer.encode(record, compact=False).decode("ascii") == rinex3_text
    assert sniffer.decode(sniffer.encode(record)) == record
    assert gzip.decompress(sniffer.encode(record, compact=False, compress_gzip=True)) == rinex3_text.encode("ascii")


@pytest.mark.quick
def test_decode_gunzips_once(rinex3_text, monkeypatch):
    calls = list()
    decompress = gzip.decompress

    def counting_decompress(data):
        calls.append(len(data))
        return decompress(data)

    monkeypatch.setattr(sniffer.gzip, "decompress", counting_decompress)
    record = sniffer.decode(gzip.compress(rinex3_text.encode("ascii")))

    assert len(calls) == 1
    assert len(record) == 2
