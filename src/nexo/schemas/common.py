"""
nexo/schemas/common.py — Tipos compartilhados pelos schemas de saída.
"""
from datetime import datetime
from typing import Annotated

from pydantic import PlainSerializer

from nexo.database import to_utc_iso

# No JSON sai sempre com "Z"; em Python continua naive UTC
UtcDatetime = Annotated[datetime, PlainSerializer(to_utc_iso, return_type=str, when_used="json")]
