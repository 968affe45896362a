from dataclasses import dataclass
from pathlib import Path
import os


_DATA_DIR = Path(os.getenv("DUTYDESK_DATA_DIR", Path(__file__).resolve().parents[2] / "data"))


@dataclass(frozen=True)
class Settings:
    app_name: str = "DutyDesk"
    api_version: str = "v1"
    secret_key: str = os.getenv("DUTYDESK_SECRET_KEY", "change-me-for-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))
    data_dir: Path = _DATA_DIR
    document_path: Path = _DATA_DIR / "db.json"
    event_log_path: Path = _DATA_DIR / "events.jsonl"
    log_level: str = os.getenv("DUTYDESK_LOG_LEVEL", "INFO")
    leaderboard_size: int = int(os.getenv("DUTYDESK_LEADERBOARD_SIZE", "10"))
    admin_username: str = os.getenv("DUTYDESK_ADMIN_USERNAME", "admin")
    admin_password: str = os.getenv("DUTYDESK_ADMIN_PASSWORD", "change-me")
    admin_user_id: str = os.getenv("DUTYDESK_ADMIN_USER_ID", "dashboard-admin")


settings = Settings()
settings.data_dir.mkdir(parents=True, exist_ok=True)
