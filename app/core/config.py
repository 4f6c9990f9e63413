import os
from functools import lru_cache

from pydantic_settings import BaseSettings


def _load_doppler_secrets():
    """Load secrets from Doppler API into environment variables.

    Must run BEFORE Settings is instantiated so pydantic can read the env vars.
    """
    token = os.getenv("DOPPLER_TOKEN")
    if not token:
        return

    try:
        import requests
        response = requests.get(
            "https://api.doppler.com/v3/configs/config/secrets/download",
            params={"format": "json"},
            auth=(token, ""),
            timeout=30,
        )
        response.raise_for_status()
        secrets = response.json()

        # Set all secrets as environment variables
        for key, value in secrets.items():
            if key not in os.environ:  # Don't override existing env vars
                os.environ[key] = value

        print(f"Loaded {len(secrets)} secrets from Doppler")
    except Exception as e:
        print(f"Warning: Failed to load Doppler secrets: {e}")


# Load Doppler secrets into environment BEFORE Settings is instantiated
_load_doppler_secrets()


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_secret_key: str = ""
    supabase_timeout_seconds: int = 10

    # Server
    environment: str = "development"
    allowed_origins: list[str] = ["http://localhost:5173"]

    # Identity
    min_phone_length: int = 10

    # Points policy
    min_points_per_visit: int = 1
    max_points_per_visit: int = 100
    default_points_per_visit: int = 10

    # Recent visits
    recent_visits_limit: int = 10
    max_recent_visits_limit: int = 100

    # Insight thresholds
    reward_points_threshold: int = 50
    loyal_customer_visits: int = 5
    engaged_customer_count: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
