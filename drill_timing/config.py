"""
Service configuration read from the environment.

A .env file next to the process is loaded first, so local development can
keep Cognito settings out of the shell.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    cognito_region: str = "us-east-1"
    cognito_user_pool_id: str = ""  # Empty = dev mode, tokens are not verified
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def dev_mode(self) -> bool:
        return not self.cognito_user_pool_id

    @property
    def issuer(self) -> str:
        return f"https://cognito-idp.{self.cognito_region}.amazonaws.com/{self.cognito_user_pool_id}"

    @property
    def jwks_uri(self) -> str:
        return f"{self.issuer}/.well-known/jwks.json"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            cognito_region=os.getenv("COGNITO_REGION", "us-east-1"),
            cognito_user_pool_id=os.getenv("COGNITO_USER_POOL_ID", ""),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings; FastAPI dependency, override in tests"""
    load_dotenv()
    return Settings.from_env()
