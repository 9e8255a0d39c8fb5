"""Configuration management for Keystone Login."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for the Keystone login service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Server configuration
    HOST: str = Field(default="127.0.0.1", description="Server host")
    PORT: int = Field(default=3000, description="Server port")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Logging format: json or text")

    # Session cookie
    SESSION_SECRET: str = Field(default="chachachangeme", description="Secret used to sign the session cookie")
    SESSION_COOKIE: str = Field(default="keystone_session", description="Session cookie name")

    # Keystone identity endpoint
    KEYSTONE_AUTH_URL: str = Field(default="", description="Keystone identity endpoint, e.g. https://identity.example.com")
    KEYSTONE_REGION: str = Field(default="", description="Preferred service catalog region")
    KEYSTONE_TENANT_ID: str = Field(default="", description="Tenant to scope the token to")
    KEYSTONE_TIMEOUT: float = Field(default=10.0, gt=0, le=120, description="Identity call timeout in seconds")
    KEYSTONE_USER_AGENT: str = Field(default="Keystone-Login/1.0", description="User-Agent sent to the identity service")

    # Login form
    USERNAME_FIELD: str = Field(default="username", description="Form field holding the username")
    PASSWORD_FIELD: str = Field(default="password", description="Form field holding the password")
    PASS_REQ_TO_CALLBACK: bool = Field(default=False, description="Pass the request to the verify callback")

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator('LOG_FORMAT')
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format"""
        valid_formats = ['json', 'text']
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of {valid_formats}")
        return v.lower()

    def get_strategy_config(self, pass_req_to_callback: Optional[bool] = None):
        """Create StrategyConfig from settings"""
        from keystone_login.auth.models import StrategyConfig

        return StrategyConfig(
            username_field=self.USERNAME_FIELD,
            password_field=self.PASSWORD_FIELD,
            region=self.KEYSTONE_REGION,
            auth_url=self.KEYSTONE_AUTH_URL,
            tenant_id=self.KEYSTONE_TENANT_ID,
            pass_req_to_callback=(
                self.PASS_REQ_TO_CALLBACK if pass_req_to_callback is None else pass_req_to_callback
            ),
            timeout=self.KEYSTONE_TIMEOUT,
            user_agent=self.KEYSTONE_USER_AGENT,
        )


# Global settings instance
settings = Settings()
