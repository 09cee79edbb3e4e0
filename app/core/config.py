"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, JWT secret, OTP and credit policy)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="billhabit",
        description="MongoDB database name"
    )

    # Session credential
    JWT_SECRET: str = Field(
        default="change-me-in-production",
        description="Secret used to sign session tokens"
    )
    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Session token signing algorithm"
    )
    SESSION_TTL_DAYS: int = Field(
        default=7,
        description="Session token and cookie lifetime in days"
    )
    SESSION_COOKIE_NAME: str = Field(
        default="token",
        description="Name of the http-only session cookie"
    )

    # OTP login
    OTP_LENGTH: int = Field(
        default=6,
        description="Number of digits in a login OTP"
    )
    OTP_TTL_MINUTES: int = Field(
        default=5,
        description="Minutes an issued OTP stays valid"
    )

    # SMS delivery (Twilio)
    TWILIO_ACCOUNT_SID: Optional[str] = Field(
        default=None,
        description="Twilio account SID for OTP SMS"
    )
    TWILIO_AUTH_TOKEN: Optional[str] = Field(
        default=None,
        description="Twilio auth token"
    )
    TWILIO_SMS_NUMBER: Optional[str] = Field(
        default=None,
        description="Sender number for OTP SMS"
    )
    SMS_COUNTRY_CODE: str = Field(
        default="+91",
        description="Country code prefixed to 10-digit account numbers"
    )

    # Billing
    DEFAULT_CREDIT: int = Field(
        default=100,
        description="Quote credits granted to a new account"
    )

    # Maintenance
    UNVERIFIED_ACCOUNT_TTL_HOURS: int = Field(
        default=24,
        description="Age after which unverified accounts are swept"
    )
    CLEANUP_INTERVAL_HOURS: int = Field(
        default=24,
        description="Interval between unverified-account sweeps"
    )
    CLEANUP_ENABLED: bool = Field(
        default=True,
        description="Run the in-process sweep scheduler"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["http://localhost:5173"],
        description="Allowed CORS origins"
    )

    @validator("JWT_SECRET")
    def validate_jwt_secret(cls, v, values):
        """Ensure the signing secret is changed in production."""
        if values.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("JWT_SECRET must be changed in production environment")
        return v

    @validator("OTP_LENGTH")
    def validate_otp_length(cls, v):
        if v < 4 or v > 10:
            raise ValueError("OTP_LENGTH must be between 4 and 10")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def cookie_samesite(self) -> str:
        # Cross-site frontend in production needs SameSite=None (with Secure)
        return "none" if self.is_production else "strict"

    @property
    def sms_configured(self) -> bool:
        return bool(
            self.TWILIO_ACCOUNT_SID
            and self.TWILIO_AUTH_TOKEN
            and self.TWILIO_SMS_NUMBER
        )

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not settings.MONGODB_DB_NAME:
        errors.append("MONGODB_DB_NAME is required")

    if settings.SESSION_TTL_DAYS <= 0:
        errors.append("SESSION_TTL_DAYS must be positive")

    # Production-specific validations
    if settings.is_production:
        if not settings.sms_configured:
            errors.append("TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_SMS_NUMBER are required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
