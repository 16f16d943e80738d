"""
nexo/config.py — Configurações centralizadas via .env
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "nexo-api"
    APP_ENV: str = "development"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Banco
    DATABASE_URL: str = "sqlite+aiosqlite:///./nexo.db"

    # Sessões emitidas pelo provedor de identidade (JWT assinado).
    # Obrigatório — sem default. Se não estiver no .env, o servidor não sobe.
    SESSION_JWT_SECRET: str
    SESSION_JWT_ALGORITHM: str = "HS256"

    # IDs de usuário com acesso ao painel /admin — separados por vírgula
    # Ex: "user_2abc,user_9xyz"
    ADMIN_USER_IDS: str = ""

    @field_validator("SESSION_JWT_SECRET")
    @classmethod
    def session_secret_must_be_strong(cls, v: str) -> str:
        if not v or v in ("troque-em-producao", "changeme", "secret"):
            raise ValueError(
                "SESSION_JWT_SECRET inválida. Gere uma com: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError(
                "SESSION_JWT_SECRET muito curta (mínimo 32 caracteres). "
                "Gere uma com: openssl rand -hex 32"
            )
        return v

    @property
    def admin_ids(self) -> set[str]:
        """Retorna o conjunto de IDs administradores."""
        return {uid.strip() for uid in self.ADMIN_USER_IDS.split(",") if uid.strip()}

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
