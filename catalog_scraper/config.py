"""Application configuration via Pydantic Settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from catalog_scraper.scrapers.base import CrawlOptions


class Settings(BaseSettings):
    """Global scraper settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Profile selection
    CONFIG_NAME: str = "calian-gnss"
    PROFILE_PATH: str = ""  # JSON profile file, takes precedence over CONFIG_NAME
    SITE_URL: str = ""  # Generic profile pointed at this URL, takes precedence over both

    # Crawl
    MAX_PAGES: int = 5
    BOT_MITIGATION: bool = False  # Humanized pacing + randomized session identity
    NAVIGATION_RETRY_DELAY: float = 2.0  # Seconds between navigation attempts

    # Browser
    HEADLESS: bool = True
    APP_VISUAL: bool = False
    APP_DEBUG: bool = False

    # Output
    OUTPUT_DIR: str = "scraped_data"
    LOG_LEVEL: str = "INFO"

    @field_validator("MAX_PAGES")
    @classmethod
    def check_max_pages(cls, value: int) -> int:
        if value < 1:
            raise ValueError("MAX_PAGES must be at least 1")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    def crawl_options(self) -> CrawlOptions:
        """Build crawl options from the environment.

        Debug mode implies visual mode.

        Returns:
            CrawlOptions for the controller and renderer
        """
        visual = self.APP_VISUAL or self.APP_DEBUG
        return CrawlOptions(
            max_pages=self.MAX_PAGES,
            humanize=self.BOT_MITIGATION,
            visual=visual,
            debug=self.APP_DEBUG,
        )


settings = Settings()
