from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class EntrySettings(BaseModel):
    """Passwordless entry options, overridable as PASSENTRY_ENTRY__<NAME>."""

    enabled: bool = True  # When false the entry routes are not registered at all
    expiration_minutes: int = Field(5, ge=1)
    key_length: int = Field(64, ge=16)
    controller_parameter: str = "ple"  # Query flag that activates the redemption controller
    key_parameter: str = "ple_key"  # Query parameter carrying the entry key
    email_parameter: str = "ple_email"  # Form field carrying the email on issuance
    email_subject: str = "Your Passwordless Entry URL"


class SmtpSettings(BaseModel):
    """Outbound mail transport. When absent, emails are only logged."""

    host: str
    port: int = 587
    username: str | None = None
    password: str | None = None
    from_email: str
    use_starttls: bool = True
    timeout: float = 10.0


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    site_url: str  # Public site the user lands on after entry, e.g. https://example.com
    site_name: str = "Passentry"
    public_url: str  # Base URL of this service, used to build entry links
    cors_origins: list[str] = []
    session_ttl_days: int = 30
    cookie_secure: bool = False  # Set to True in production with HTTPS
    admin_email: str | None = None  # Bootstrap user created on startup if missing
    admin_name: str = "Administrator"
    entry: EntrySettings = EntrySettings()
    smtp: SmtpSettings | None = None

    model_config = {
        "env_file": [".env"],
        "env_prefix": "PASSENTRY_",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }

    @property
    def entry_base_url(self) -> str:
        """Absolute URL of the redemption controller."""
        return f"{self.public_url.rstrip('/')}/entry"
