"""Application settings and validation."""

import os


class Settings:
    ENV: str
    LOG_LEVEL: str
    HOST: str
    PORT: int
    ALLOW_DEV_CORS: bool
    SUMMARY_API_URL: str
    SUMMARY_MODEL: str
    SUMMARY_TIMEOUT_SECONDS: float
    SUMMARY_MAX_RETRIES: int
    SUMMARY_RETRY_BACKOFF_SECONDS: float

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", "8080"))
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self.SUMMARY_API_URL = os.getenv("SUMMARY_API_URL", "http://localhost:11434/api/chat")
        self.SUMMARY_MODEL = os.getenv("SUMMARY_MODEL", "llama2")
        self.SUMMARY_TIMEOUT_SECONDS = float(os.getenv("SUMMARY_TIMEOUT_SECONDS", "30"))
        # 0 keeps the outbound call single-shot
        self.SUMMARY_MAX_RETRIES = int(os.getenv("SUMMARY_MAX_RETRIES", "0"))
        self.SUMMARY_RETRY_BACKOFF_SECONDS = float(os.getenv("SUMMARY_RETRY_BACKOFF_SECONDS", "0.5"))
        self._validate()

    def _validate(self):
        if not self.SUMMARY_API_URL.startswith(("http://", "https://")):
            raise RuntimeError("SUMMARY_API_URL must be an http(s) URL")
        if not self.SUMMARY_MODEL.strip():
            raise RuntimeError("SUMMARY_MODEL must not be empty")
        if self.SUMMARY_TIMEOUT_SECONDS <= 0:
            raise RuntimeError("SUMMARY_TIMEOUT_SECONDS must be greater than zero")
        if self.SUMMARY_MAX_RETRIES < 0:
            raise RuntimeError("SUMMARY_MAX_RETRIES must be zero or positive")
        if self.SUMMARY_RETRY_BACKOFF_SECONDS < 0:
            raise RuntimeError("SUMMARY_RETRY_BACKOFF_SECONDS must be zero or positive")
        if not 0 < self.PORT < 65536:
            raise RuntimeError("PORT must be between 1 and 65535")


settings = Settings()
