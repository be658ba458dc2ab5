import json

import pytest

from com.otprelay.entities.otp_record import OtpRecord, decode_record, encode_record


def test_record_survives_store_encoding():
    record = OtpRecord(otp="004821", created_at=1_700_000_000_123, used=False)
    raw = encode_record(record)
    assert json.loads(raw) == {"otp": "004821", "createdAt": 1_700_000_000_123, "used": False}
    assert decode_record(raw) == record


def test_missing_created_at_defaults_to_zero():
    assert decode_record('{"otp": "4821", "used": true}') == OtpRecord("4821", 0, True)


@pytest.mark.parametrize("raw", [
    None,
    "",
    "not json",
    "[]",
    '"4821"',
    '{"used": false}',
    '{"otp": "", "used": false}',
    '{"otp": 4821, "used": false}',
    '{"otp": "4821"}',
    '{"otp": "4821", "used": "false"}',
    '{"otp": "4821", "used": 0}',
    '{"otp": "4821", "used": false, "createdAt": "yesterday"}',
    '{"otp": "4821", "used": false, "createdAt": true}',
])
def test_malformed_records_decode_as_absent(raw):
    assert decode_record(raw) is None
