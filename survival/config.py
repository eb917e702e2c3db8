# survival/config.py
import os
from dataclasses import dataclass


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """
    アプリ全体の設定。
    create_app() にそのまま渡し、DB エンジンやログ設定はここから組み立てる。
    """
    database_url: str = "sqlite:///./survival.db"

    # リクエスト／レスポンスのログ出力
    log_request_query: bool = True
    log_request_body: bool = False
    log_response_body: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.environ.get("SURVIVAL_DATABASE_URL") or cls.database_url,
            log_request_query=_env_flag("SURVIVAL_LOG_REQUEST_QUERY", cls.log_request_query),
            log_request_body=_env_flag("SURVIVAL_LOG_REQUEST_BODY", cls.log_request_body),
            log_response_body=_env_flag("SURVIVAL_LOG_RESPONSE_BODY", cls.log_response_body),
        )
