"""
nexo/routes/common.py — Utilidades compartilhadas pelas rotas.
"""
from nexo.errors import ValidationError

# Maior valor de um INTEGER do SQLite
MAX_ID = 2**63 - 1


def parse_id(raw: str, what: str) -> int:
    """IDs chegam como texto no path: só dígitos ASCII, de 1 a MAX_ID. O resto é 400."""
    if not (raw.isascii() and raw.isdigit()):
        raise ValidationError(f"Invalid {what} ID")
    value = int(raw)
    if not 1 <= value <= MAX_ID:
        raise ValidationError(f"Invalid {what} ID")
    return value


def ok(data=None, status_message: str | None = None, **extra) -> dict:
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if status_message:
        body["message"] = status_message
    body.update(extra)
    return body
