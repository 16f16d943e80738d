"""
nexo/middlewares/auth.py — Autenticação das rotas.

Dois fluxos:

1. API key (acesso externo: scripts, atalhos, bots):
   - Header X-API-Key: nxk_...
   - Valida formato, existência, status e validade
   - Opcionalmente exige um scope (ex: "shopping:write")
   - Falhas de validação viram SEMPRE o mesmo 401; o motivo só vai pro log

2. Sessão (web, via provedor de identidade):
   - Authorization: Bearer <JWT de sessão>
   - Único caminho para criar keys: uma key não cria outra key
   - require_admin ainda confere a allow-list ADMIN_USER_IDS
"""
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from nexo.config import settings
from nexo.controllers.api_key_controller import ApiKeyController
from nexo.database import get_db
from nexo.errors import AuthError, Forbidden, MissingCredential, SessionError
from nexo.schemas.api_key import AuthenticatedIdentity
from nexo.services.keys import key_prefix
from nexo.services.scopes import has_scope
from nexo.services.session_service import SessionIdentity, verify_session_token

API_KEY_HEADER = "X-API-Key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Dependência: API key
# ---------------------------------------------------------------------------

def require_api_key(scope: Optional[str] = None):
    """
    Factory: retorna dependência que valida a X-API-Key e, se pedido, o scope.

    Uso:
        @router.get("/shopping")
        async def list_items(auth: AuthenticatedIdentity = Depends(require_api_key("shopping:read"))):
    """
    async def _check(
        request: Request,
        api_key: Optional[str] = Depends(api_key_header),
        db: AsyncSession = Depends(get_db),
    ) -> AuthenticatedIdentity:
        if not api_key:
            raise MissingCredential(f"Missing {API_KEY_HEADER} header")

        try:
            identity = await ApiKeyController.validate(db, api_key)
        except AuthError as e:
            logger.warning(
                f"🚫 API key recusada ({e.kind}) prefixo={key_prefix(api_key)!r} "
                f"em {request.method} {request.url.path}"
            )
            raise AuthError("Invalid or inactive API key")

        if scope and not has_scope(identity.scopes, scope):
            logger.warning(f"⛔ Key #{identity.key_id} sem scope '{scope}'")
            raise Forbidden(f"Missing required scope: {scope}")

        request.state.identity = identity
        return identity

    return _check


# ---------------------------------------------------------------------------
# Dependência: sessão do provedor de identidade
# ---------------------------------------------------------------------------

async def require_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionIdentity:
    """Valida o Bearer JWT de sessão. Lança 401 se ausente, inválido ou expirado."""
    if not credentials:
        raise SessionError("Unauthorized - please sign in")
    try:
        return verify_session_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise SessionError("Session expired - please sign in again")
    except jwt.InvalidTokenError:
        raise SessionError("Unauthorized - please sign in")


async def require_admin(session: SessionIdentity = Depends(require_session)) -> SessionIdentity:
    """Sessão válida + user_id na allow-list ADMIN_USER_IDS."""
    if session.user_id not in settings.admin_ids:
        logger.warning(f"⛔ Acesso admin negado para {session.user_id}")
        raise Forbidden("Access denied")
    return session
