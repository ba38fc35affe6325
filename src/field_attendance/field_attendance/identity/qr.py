from __future__ import annotations

import io
import json
from dataclasses import dataclass
from typing import BinaryIO, Optional

import qrcode
from PIL import Image

from ..core.exceptions import ValidationError
from ..roster.model import Employee


@dataclass(frozen=True)
class IdentityPayload:
    """What an employee ID card's QR code carries."""

    employee_id: str
    name: Optional[str] = None
    department_id: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_legacy(self) -> bool:
        return self.name is None and self.department_id is None


def encode_identity(employee: Employee) -> str:
    data = {"id": employee.employee_id, "name": employee.name, "departmentId": employee.department_id}
    if employee.phone:
        data["phone"] = employee.phone
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def decode_identity(payload: str) -> IdentityPayload:
    """Parse a scanned payload.

    Accepts the JSON form and, for older cards, a bare employee id.
    """
    text = (payload or "").strip()
    if not text:
        raise ValidationError("Empty QR payload")

    try:
        data = json.loads(text)
    except ValueError:
        return IdentityPayload(employee_id=text)

    if not isinstance(data, dict):
        # e.g. a numeric legacy id that happens to be valid JSON
        return IdentityPayload(employee_id=text)

    employee_id = str(data.get("id") or "").strip()
    if not employee_id:
        raise ValidationError("QR payload has no employee id")

    return IdentityPayload(
        employee_id=employee_id,
        name=data.get("name"),
        department_id=data.get("departmentId"),
        phone=data.get("phone"),
    )


def render_identity_qr(payload: str) -> bytes:
    """PNG bytes of a QR code carrying ``payload``."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def scan_identity_image(stream: BinaryIO) -> IdentityPayload:
    """Decode the first QR code found in an uploaded image."""
    # pyzbar loads the zbar shared library on import; only scanning needs it.
    from pyzbar.pyzbar import decode as pyzbar_decode

    img = Image.open(stream).convert("RGB")
    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code found in the image")
    return decode_identity(decoded[0].data.decode("utf-8"))
