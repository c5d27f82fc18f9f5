from pydantic_settings import BaseSettings
from typing import Optional
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("PORT", os.getenv("API_PORT", "5000")))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "*")

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # Razorpay credentials
    RAZORPAY_KEY_ID: str = os.getenv("RAZORPAY_KEY_ID", "")
    RAZORPAY_SECRET: str = os.getenv("RAZORPAY_SECRET", "")
    RAZORPAY_BASE_URL: str = os.getenv("RAZORPAY_BASE_URL", "https://api.razorpay.com/v1")
    PAYMENT_CURRENCY: str = os.getenv("PAYMENT_CURRENCY", "INR")

    # Email transport (OTP delivery)
    EMAIL_USER: str = os.getenv("EMAIL_USER", "")
    EMAIL_PASS: str = os.getenv("EMAIL_PASS", "")
    SMTP_HOST: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "465"))
    OTP_EMAIL_SUBJECT: str = os.getenv("OTP_EMAIL_SUBJECT", "KannadaMatch OTP Verification")

    # OTP / matching behaviour
    OTP_TTL_MINUTES: int = int(os.getenv("OTP_TTL_MINUTES", "10"))
    RECENT_MATCHES_LIMIT: int = int(os.getenv("RECENT_MATCHES_LIMIT", "6"))
    PLACEHOLDER_IMAGE_URL: str = os.getenv(
        "PLACEHOLDER_IMAGE_URL",
        "https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?ixlib=rb-4.0.3&auto=format&fit=crop&w=300&q=80",
    )

    # Logging
    LOG_DIR: Optional[str] = os.getenv("LOG_DIR", "logs")

    class Config:
        case_sensitive = True


settings = Settings()
