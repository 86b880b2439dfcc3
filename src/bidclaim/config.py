from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    database_url: str = "sqlite:///./bidclaim.db"

    # Scraper
    scraper_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )
    scraper_request_timeout: int = 30
    listing_fetch_timeout: float = 45.0  # upper bound for one metadata fetch

    # Credits
    signup_bonus_credits: int = 500
    trial_credits: int = 500

    # Email (Resend)
    resend_api_key: str = ""
    email_from: str = "BidSquire <onboarding@resend.dev>"

    @property
    def email_enabled(self) -> bool:
        return bool(self.resend_api_key)

    # ActiveCampaign
    activecampaign_api_url: str = ""
    activecampaign_api_key: str = ""
    activecampaign_trial_tag: str = "Free Trial"

    @property
    def activecampaign_enabled(self) -> bool:
        return bool(self.activecampaign_api_url and self.activecampaign_api_key)

    # Cross-app provisioning (main analysis app)
    main_app_url: str = ""
    cross_app_secret: str = ""
    activation_token_ttl_hours: int = 24

    @property
    def provisioning_enabled(self) -> bool:
        return bool(self.main_app_url and self.cross_app_secret)

    # Auth
    api_key: str = ""  # Set to protect operator endpoints; empty = no auth

    # Errors
    expose_internal_errors: bool = False  # development only

    # Log
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
