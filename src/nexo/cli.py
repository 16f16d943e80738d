"""
nexo/cli.py — Linha de comando do operador para API keys.

Caminho confiável: aqui omitir --scopes gera uma key com "*".

Uso:
  nexo-keys issue  --user user_123 --name "Atalho iPhone" [--org org_1] [--scopes shopping:read,events:read] [--days 30]
  nexo-keys list   --user user_123
  nexo-keys revoke --user user_123 --id 7
"""
import argparse
import asyncio
import sys

from nexo.controllers.api_key_controller import ApiKeyController, expires_from_days
from nexo.database import AsyncSessionLocal, close_db, init_db
from nexo.errors import NexoError


async def _issue(args) -> int:
    scopes = [s.strip() for s in args.scopes.split(",") if s.strip()] if args.scopes else None
    async with AsyncSessionLocal() as db:
        record, plain_key = await ApiKeyController.issue(
            db,
            user_id=args.user,
            name=args.name,
            org_id=args.org,
            scopes=scopes,
            expires_at=expires_from_days(args.days),
        )
    print(f"✅ Key #{record.id} criada ({', '.join(record.scopes)})")
    print(f"🔑 {plain_key}")
    print("⚠️  Guarde a key agora — não será exibida novamente.")
    return 0


async def _list(args) -> int:
    async with AsyncSessionLocal() as db:
        records = await ApiKeyController.list_for_user(db, args.user)
    if not records:
        print("📭 Nenhuma key.")
        return 0
    for r in records:
        status = "ativa" if r.is_active else "revogada"
        expires = r.expires_at.isoformat() if r.expires_at else "nunca"
        print(f"#{r.id:<4} {r.key_prefix}…  {r.name:<24} {status:<9} expira: {expires}  {','.join(r.scopes)}")
    return 0


async def _revoke(args) -> int:
    async with AsyncSessionLocal() as db:
        revoked = await ApiKeyController.revoke(db, args.id, args.user)
    if not revoked:
        print(f"❌ Key #{args.id} não encontrada para {args.user}.")
        return 1
    print(f"🔒 Key #{args.id} revogada.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nexo-keys", description="Gerencia API keys do Nexo.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_issue = sub.add_parser("issue", help="Emitir nova key")
    p_issue.add_argument("--user", required=True)
    p_issue.add_argument("--name", required=True)
    p_issue.add_argument("--org", default=None)
    p_issue.add_argument("--scopes", default=None, help="Separados por vírgula. Omitido = '*'")
    p_issue.add_argument("--days", type=float, default=None)
    p_issue.set_defaults(handler=_issue)

    p_list = sub.add_parser("list", help="Listar keys de um usuário")
    p_list.add_argument("--user", required=True)
    p_list.set_defaults(handler=_list)

    p_revoke = sub.add_parser("revoke", help="Revogar key")
    p_revoke.add_argument("--user", required=True)
    p_revoke.add_argument("--id", type=int, required=True)
    p_revoke.set_defaults(handler=_revoke)

    return parser


async def _run(args) -> int:
    await init_db()
    try:
        return await args.handler(args)
    except NexoError as e:
        print(f"❌ {e.message}", file=sys.stderr)
        return 2
    finally:
        await close_db()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
