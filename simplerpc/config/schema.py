"""Configuration schema using Pydantic.

Settings come from ~/.simplerpc/config.json and SIMPLERPC_* environment
variables, e.g. SIMPLERPC_URL or SIMPLERPC_AUTH__COOKIE_FILE. Environment
values override the file.
"""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from simplerpc.auth import Auth, CookieFile, UserPass
from simplerpc.utils.exceptions import ConfigError


class RpcAuthConfig(BaseModel):
    """Credentials for the RPC endpoint."""
    user: str = ""
    password: str | None = None
    cookie_file: str = ""  # Path to the node's .cookie; takes precedence over user/password


class RpcConfig(BaseSettings):
    """Root configuration for simplerpc."""
    model_config = SettingsConfigDict(
        env_prefix="SIMPLERPC_", env_nested_delimiter="__", validate_assignment=True
    )

    url: str = "http://127.0.0.1:8332"
    timeout: float = Field(default=60.0, gt=0)
    protocol_version: Literal["v28", "v29", "auto"] = "v29"
    auth: RpcAuthConfig = Field(default_factory=RpcAuthConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File values arrive as init kwargs; environment wins over them.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    def to_auth(self) -> Auth:
        """Pick the credential source: cookie file first, then user/password."""
        if self.auth.cookie_file:
            return CookieFile(self.auth.cookie_file)
        if self.auth.user:
            return UserPass(self.auth.user, self.auth.password)
        raise ConfigError(
            "No RPC credentials configured: set auth.cookie_file or auth.user",
            code="MISSING_CREDENTIALS",
        )
