"""
nexo/controllers/context.py — Contexto pessoal x household.

Identidade com org_id → enxerga só as linhas daquele household.
Sem org_id           → só as linhas que criou e que não são de household.
"""
from sqlalchemy import and_

from nexo.errors import Forbidden


def context_clause(model, user_id: str, org_id: str | None):
    if org_id:
        return model.org_id == org_id
    return and_(model.created_by == user_id, model.org_id.is_(None))


def ensure_access(row, user_id: str, org_id: str | None) -> None:
    """Lança 403 se a linha está fora do contexto da identidade."""
    if org_id:
        allowed = row.org_id == org_id
    else:
        allowed = row.created_by == user_id and row.org_id is None
    if not allowed:
        raise Forbidden("Access denied")
