"""
nexo/services/keys.py — Geração e hash das API keys.

Formato da key:  nxk_<43 caracteres base64url>
  - nxk_  → marcador fixo, deixa a key reconhecível em logs e headers
  - resto → 32 bytes aleatórios (256 bits) de secrets.token_bytes

No banco vão só:
  - key_hash   = SHA-256 hex da key COMPLETA (marcador incluso)
  - key_prefix = 12 primeiros caracteres ("nxk_" + 8), para listagem
"""
import base64
import hashlib
import secrets

KEY_MARKER = "nxk_"
PREFIX_LENGTH = 12
SECRET_BYTES = 32


def hash_api_key(key: str) -> str:
    """SHA-256 hex da key inteira, sem salt."""
    return hashlib.sha256(key.encode()).hexdigest()


def key_prefix(key: str) -> str:
    return key[:PREFIX_LENGTH]


def has_key_format(key: str | None) -> bool:
    return bool(key) and key.startswith(KEY_MARKER)


def generate_api_key() -> tuple[str, str, str]:
    """
    Gera uma nova key.
    Retorna (key_em_texto_puro, key_hash, key_prefix).
    """
    random_part = base64.urlsafe_b64encode(secrets.token_bytes(SECRET_BYTES)).rstrip(b"=").decode()
    key = f"{KEY_MARKER}{random_part}"
    return key, hash_api_key(key), key_prefix(key)
