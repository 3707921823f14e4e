"""
Settings

Host options read from the environment (``WIREMAP_*`` variables or a
``.env`` file). The container only consults them for file layout and for
the stability flag that turns off cache staleness checks.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WiremapSettings(BaseSettings):
    """Host options for a wiremap project.

    Example::

        # WIREMAP_ENVIRONMENT=production
        settings = WiremapSettings()
        settings.is_production   # True
    """

    model_config = SettingsConfigDict(
        env_prefix="WIREMAP_", case_sensitive=False, extra="ignore", env_file=".env"
    )

    environment: Literal["development", "staging", "production"] = "development"
    source_dir: str = Field(default="src", min_length=1)
    cache_dir: str = Field(default="cache", min_length=1)
    cache_file: str = Field(default="wiremap-container.json", min_length=1)
    config_file: str = Field(default="wiremap_config.py", min_length=1)

    @property
    def is_production(self) -> bool:
        """Stability mode: trust the cache without checking source files."""
        return self.environment == "production"
