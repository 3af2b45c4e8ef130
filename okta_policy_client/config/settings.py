from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings
from typing import Optional
from urllib.parse import urlparse
import os

from okta_policy_client.utils.error_handling import ConfigurationError


class Settings(BaseSettings):
    OKTA_CLIENT_ORGURL: str
    OKTA_API_TOKEN: str

    # HTTP behaviour
    OKTA_REQUEST_TIMEOUT: int = int(os.getenv("OKTA_REQUEST_TIMEOUT", "30"))
    OKTA_MAX_PAGES: int = int(os.getenv("OKTA_MAX_PAGES", "100"))
    # Okta caps /api/v1/policies pages at 200
    OKTA_POLICY_PAGE_LIMIT: int = int(os.getenv("OKTA_POLICY_PAGE_LIMIT", "200"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: Optional[str] = os.getenv("LOG_DIR") or None

    # Name prefix for resources created by integration runs
    TEST_RESOURCE_PREFIX: str = os.getenv("TEST_RESOURCE_PREFIX", "py-sdk:")

    @property
    def org_url(self) -> str:
        """OKTA_CLIENT_ORGURL normalized to scheme://host with no trailing slash"""
        url = self.OKTA_CLIENT_ORGURL.strip().rstrip('/')
        if not url.startswith(('http://', 'https://')):
            url = f"https://{url}"
        return url

    @property
    def tenant_id(self) -> str:
        """Extract tenant ID from OKTA_CLIENT_ORGURL"""
        parsed_url = urlparse(self.org_url)
        return parsed_url.netloc.split('.')[0]

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = "allow"  # Allow extra fields


def get_settings(**overrides) -> Settings:
    """
    Build a Settings instance from the environment (and .env).

    Keyword overrides take precedence over the environment, which is how tests
    point the client at a local fake server.

    Raises:
        ConfigurationError: If required Okta settings are missing or invalid
    """
    try:
        return Settings(**overrides)
    except PydanticValidationError as e:
        missing = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid Okta configuration: {', '.join(missing)}",
            config_key=missing[0] if missing else None,
            original_exception=e,
        ) from e
