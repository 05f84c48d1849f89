from pydantic_settings import BaseSettings, SettingsConfigDict


# this class is inherit from pydantic-settings class: BaseSettings
class Settings(BaseSettings):
    app_name: str = "Order Service"
    environment: str = "local"  # local | dev | prod
    product_service_url: str = "http://localhost:8081"
    # applied to connect/read/write/pool of every outbound Product Service call
    product_service_timeout_s: float = 5.0
    log_level: str = "INFO"

    # loading environment file if it is available
    # env keys are matched case-insensitively against the field names of class:Settings
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


# getting settings class instances-object
settings = Settings()
