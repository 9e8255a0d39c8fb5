"""
Strategy configuration model.

This module contains the StrategyConfig model which captures everything
the Keystone strategy needs to know at construction time.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_USERNAME_FIELD = "username"
DEFAULT_PASSWORD_FIELD = "password"


class StrategyConfig(BaseModel):
    """
    Immutable configuration for the Keystone authentication strategy.

    ``auth_url`` may be left empty here. Construction often happens before
    the application has finished wiring its configuration, so a missing
    identity endpoint is only reported when a login is attempted.

    Example:
        config = StrategyConfig(
            auth_url="https://identity.api.rackspacecloud.com",
            region="ord",
            pass_req_to_callback=True
        )
    """

    model_config = ConfigDict(frozen=True)

    username_field: str = Field(
        default=DEFAULT_USERNAME_FIELD,
        description="Field name where the username is found (bracket notation allowed)"
    )

    password_field: str = Field(
        default=DEFAULT_PASSWORD_FIELD,
        description="Field name where the password is found (bracket notation allowed)"
    )

    region: str = Field(
        default="",
        description="Preferred region when resolving endpoints from the service catalog"
    )

    auth_url: str = Field(
        default="",
        description="Base URL of the Keystone identity endpoint"
    )

    tenant_id: str = Field(
        default="",
        description="Tenant the token should be scoped to (optional)"
    )

    pass_req_to_callback: bool = Field(
        default=False,
        description="When true the request is the first argument to the verify callback"
    )

    timeout: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound in seconds for the call to the identity service"
    )

    user_agent: str = Field(
        default="Keystone-Login/1.0",
        description="User-Agent header sent to the identity service"
    )

    @field_validator("username_field", mode="before")
    @classmethod
    def default_username_field(cls, v):
        return v or DEFAULT_USERNAME_FIELD

    @field_validator("password_field", mode="before")
    @classmethod
    def default_password_field(cls, v):
        return v or DEFAULT_PASSWORD_FIELD

    @field_validator("region", "auth_url", "tenant_id", mode="before")
    @classmethod
    def blank_if_unset(cls, v):
        return v or ""
