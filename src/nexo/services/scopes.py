"""
nexo/services/scopes.py — Scopes das API keys e regra de autorização.

Scope = "<recurso>:<ação>", ou "*" para acesso total.

Regras de has_scope, nesta ordem:
  1. "*" na key           → autoriza tudo
  2. scope exato presente → autoriza
  3. pede "x:read" e a key tem "x:write" → autoriza (write implica read)
O contrário (read implicar write) NÃO vale.
"""
from collections.abc import Iterable

WILDCARD = "*"

RESOURCE_SCOPES = (
    "shopping:read",
    "shopping:write",
    "events:read",
    "events:write",
    "expenses:read",
    "expenses:write",
    "chores:read",
    "chores:write",
)

# Tudo que pode ser gravado numa key (inclui o curinga)
API_SCOPES = (WILDCARD, *RESOURCE_SCOPES)


def has_scope(scopes: Iterable[str], required: str) -> bool:
    granted = set(scopes)
    if WILDCARD in granted:
        return True
    if required in granted:
        return True

    resource, sep, action = required.partition(":")
    if sep and action == "read":
        return f"{resource}:write" in granted
    return False


def first_invalid_scope(scopes: Iterable[str], allowed: Iterable[str] = API_SCOPES) -> str | None:
    """Retorna o primeiro scope fora da lista permitida, ou None se todos forem válidos."""
    allowed = set(allowed)
    for scope in scopes:
        if scope not in allowed:
            return scope
    return None
