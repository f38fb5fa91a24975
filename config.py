import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.database_url = os.getenv("DATABASE_URL")
        self.database_name = os.getenv("DATABASE_NAME")
        self.jwt_secret = os.getenv("JWT_SECRET")
        self.token_expiry_days = int(os.getenv("TOKEN_EXPIRY_DAYS", "7"))

        self.braintree_environment = (os.getenv("BRAINTREE_ENVIRONMENT", "sandbox") or "sandbox").strip().lower()
        self.braintree_merchant_id = os.getenv("BRAINTREE_MERCHANT_ID", "")
        self.braintree_public_key = os.getenv("BRAINTREE_PUBLIC_KEY", "")
        self.braintree_private_key = os.getenv("BRAINTREE_PRIVATE_KEY", "")

        origins = os.getenv("CORS_ALLOWED_ORIGINS", "*")
        self.cors_allowed_origins = [o.strip() for o in origins.split(",") if o.strip()] or ["*"]

        self.log_level = (os.getenv("LOG_LEVEL", "INFO") or "INFO").upper()
        self.seed_database = _env_flag("SEED_DATABASE")
        self.port = int(os.getenv("PORT", 8000))


settings = Settings()
