"""
nexo/services/session_service.py — Sessões do provedor de identidade (JWT).

O provedor de identidade é externo: ele autentica o usuário e emite um
JWT assinado com SESSION_JWT_SECRET. Aqui só validamos a assinatura e
extraímos quem é o usuário (sub) e, se houver, o household ativo (org_id).
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from nexo.config import settings


@dataclass(frozen=True)
class SessionIdentity:
    user_id: str
    org_id: str | None = None
    email: str | None = None


def create_session_token(
    user_id: str,
    org_id: str | None = None,
    email: str | None = None,
    expire_minutes: int = 60,
) -> str:
    """
    Emite um JWT de sessão no mesmo formato do provedor.
    Usado em desenvolvimento e nos testes.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=expire_minutes),
    }
    if org_id:
        payload["org_id"] = org_id
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.SESSION_JWT_SECRET, algorithm=settings.SESSION_JWT_ALGORITHM)


def verify_session_token(token: str) -> SessionIdentity:
    """
    Valida o JWT e retorna a identidade.
    Lança jwt.InvalidTokenError (ou subclasse, ex: ExpiredSignatureError) se inválido.
    """
    payload = jwt.decode(
        token,
        settings.SESSION_JWT_SECRET,
        algorithms=[settings.SESSION_JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
    return SessionIdentity(
        user_id=str(payload["sub"]),
        org_id=payload.get("org_id") or None,
        email=payload.get("email"),
    )
