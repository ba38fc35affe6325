import io
import json

import pytest

from src.field_attendance.field_attendance.core.exceptions import ValidationError
from src.field_attendance.field_attendance.identity.qr import (
    decode_identity,
    encode_identity,
    render_identity_qr,
    scan_identity_image,
)
from src.field_attendance.field_attendance.roster.model import Employee

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_encode_is_compact_json():
    employee = Employee(employee_id="E1", name="Ali", department_id="D1", phone="0500")
    payload = encode_identity(employee)

    assert " " not in payload
    assert json.loads(payload) == {"id": "E1", "name": "Ali", "departmentId": "D1", "phone": "0500"}


def test_encode_omits_missing_phone():
    payload = encode_identity(Employee(employee_id="E1", name="علي", department_id="D1"))
    assert "phone" not in json.loads(payload)
    assert "علي" in payload


def test_decode_json_payload():
    identity = decode_identity('{"id":"E1","name":"Ali","departmentId":"D1"}')
    assert identity.employee_id == "E1"
    assert identity.department_id == "D1"
    assert not identity.is_legacy


@pytest.mark.parametrize("payload", ["E1", " E1 ", "12345"])
def test_decode_legacy_bare_id(payload):
    identity = decode_identity(payload)
    assert identity.employee_id == payload.strip()
    assert identity.is_legacy


@pytest.mark.parametrize("payload", ["", "   ", '{"name":"Ali"}'])
def test_decode_rejects_unusable_payloads(payload):
    with pytest.raises(ValidationError):
        decode_identity(payload)


def test_render_returns_png():
    png = render_identity_qr('{"id":"E1"}')
    assert png.startswith(PNG_SIGNATURE)


def test_scan_round_trip():
    pytest.importorskip("pyzbar.pyzbar")
    payload = encode_identity(Employee(employee_id="E7", name="Huda", department_id="D2"))

    identity = scan_identity_image(io.BytesIO(render_identity_qr(payload)))

    assert identity.employee_id == "E7"
    assert identity.name == "Huda"
