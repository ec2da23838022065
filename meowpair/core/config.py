from urllib.parse import urlparse

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://meowpair:meowpair@db:5432/meowpair"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Public URL of the mini-app; its hostname is the JWT audience.
    APP_URL: str = "http://localhost:3000"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # Farcaster Quick Auth
    QUICK_AUTH_ISSUER: str = "https://auth.farcaster.xyz"
    QUICK_AUTH_JWKS_URL: str = "https://auth.farcaster.xyz/.well-known/jwks.json"
    QUICK_AUTH_ALGORITHMS: str = "RS256,ES256"

    # Empty → in-process store. Example: "redis://localhost:6379/0"
    NOTIFICATION_STORE_URL: str = ""

    # CatMarketplace contract (Base Sepolia by default)
    MARKETPLACE_ADDRESS: str = ""
    MARKETPLACE_RPC_URL: str = "https://sepolia.base.org"
    MARKETPLACE_CHAIN_ID: int = 84532

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.strip().lower() == "development"

    @property
    def auth_domain(self) -> str:
        return urlparse(self.APP_URL).hostname or self.APP_URL

    @property
    def quick_auth_algorithms(self) -> list[str]:
        return [a.strip() for a in self.QUICK_AUTH_ALGORITHMS.split(",") if a.strip()]


settings = Settings()
