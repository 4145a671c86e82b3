"""Application configuration management."""
import os
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


DEFAULT_SECRET_KEY = "change-this-in-production"


@dataclass
class APIConfig:
    """External lookup credentials configuration."""
    safe_browsing: Optional[str] = field(default_factory=lambda: os.getenv("GOOGLE_SAFE_BROWSING_KEY"))
    virustotal: Optional[str] = field(default_factory=lambda: os.getenv("VIRUSTOTAL_API_KEY"))
    whois_enabled: bool = field(default_factory=lambda: _env_bool("WHOIS_ENABLED", "True"))


@dataclass
class ReportingConfig:
    """Manual reporting endpoints."""
    google_safe_browsing: str = "https://safebrowsing.google.com/safebrowsing/report_phish/"
    phishtank: str = "https://www.phishtank.com/add_web_phish.php"
    apwg_email: str = "reportphishing@apwg.org"
    cisa: str = "https://www.cisa.gov/report"


@dataclass
class AppConfig:
    """Application configuration."""
    # Environment
    env: str = field(default_factory=lambda: os.getenv("FLASK_ENV", "production"))
    debug: bool = field(default_factory=lambda: _env_bool("FLASK_DEBUG", "False"))
    version: str = "2.0.0"

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "5000")))

    # Security
    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY))
    allowed_origins: list = field(default_factory=lambda: os.getenv("ALLOWED_ORIGINS", "*").split(","))

    # Rate Limiting
    rate_limit_per_day: int = field(default_factory=lambda: int(os.getenv("RATE_LIMIT_DAY", "200")))
    rate_limit_per_hour: int = field(default_factory=lambda: int(os.getenv("RATE_LIMIT_HOUR", "50")))
    rate_limit_per_minute: int = field(default_factory=lambda: int(os.getenv("RATE_LIMIT_MINUTE", "10")))

    # Request Settings
    max_url_length: int = 2000
    max_redirects: int = 5
    expansion_timeout: float = field(default_factory=lambda: float(os.getenv("EXPANSION_TIMEOUT", "5")))
    probe_timeout: float = field(default_factory=lambda: float(os.getenv("PROBE_TIMEOUT", "5")))
    lookup_timeout: float = field(default_factory=lambda: float(os.getenv("LOOKUP_TIMEOUT", "10")))
    strategy_timeout: float = field(default_factory=lambda: float(os.getenv("STRATEGY_TIMEOUT", "15")))
    user_agent: str = "Mozilla/5.0 (compatible; QuishGuard/2.0)"

    # Cache
    cache_enabled: bool = field(default_factory=lambda: _env_bool("CACHE_ENABLED", "True"))
    cache_ttl: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL", "3600")))
    cache_max_size: int = field(default_factory=lambda: int(os.getenv("CACHE_MAX_SIZE", "100")))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE"))

    # APIs
    apis: APIConfig = field(default_factory=APIConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"


# Global config instance
config = AppConfig()
