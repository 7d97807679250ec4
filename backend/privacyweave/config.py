from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./privacyweave.db"
    # "database" or "memory"; chosen once at startup
    storage_backend: str = "database"

    # Resume / chat attachment uploads
    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = 5 * 1024 * 1024  # 5 MiB
    allowed_upload_extensions: tuple[str, ...] = (".pdf", ".doc", ".docx")

    # Email notifications (SMTP)
    email_service: str | None = None
    email_user: str | None = None
    email_password: str | None = None
    email_recipients: str | None = None
    email_host: str | None = None
    email_port: int | None = None
    smtp_timeout_seconds: float = 30.0

    # WhatsApp notifications (Twilio)
    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None
    twilio_phone_number: str | None = None
    whatsapp_recipient_number: str | None = None

    # Admin account created at startup when all three are set
    admin_username: str | None = None
    admin_email: str | None = None
    admin_password: str | None = None

    session_ttl_seconds: int = 24 * 60 * 60
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    company_name: str = "PrivacyWeave"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
