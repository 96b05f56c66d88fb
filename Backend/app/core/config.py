from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """
    Application configuration settings.
    Loads from environment variables or .env file.
    """
    
    # Application
    APP_NAME: str = "Car Management API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    HOST: str = "127.0.0.1"
    PORT: int = 5000
    
    # Database
    DATABASE_URL: str = "mongodb://localhost:27017/car_management"
    DATABASE_NAME: str = "car_management"
    
    # JWT Authentication
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 43200  # 30 days
    
    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    
    # Razorpay
    # Both keys are required for order creation, only the secret for verification
    RAZORPAY_KEY_ID: str = ""
    RAZORPAY_KEY_SECRET: str = ""
    RAZORPAY_API_BASE: str = "https://api.razorpay.com/v1"
    PAYMENT_CURRENCY: str = "INR"
    PAYMENT_GATEWAY_TIMEOUT: float = 15.0
    
    # Image storage
    # Cloudinary is used when the cloud name is set, then local disk, then data URIs
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    IMAGE_UPLOAD_TIMEOUT: float = 30.0
    SERVERLESS: bool = False
    UPLOAD_DIR: str = "uploads"
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
    INLINE_IMAGE_WARN_BYTES: int = 1024 * 1024
    
    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
