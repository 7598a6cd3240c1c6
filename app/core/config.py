import os
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application configuration settings.
    """
    model_config = SettingsConfigDict(env_prefix="SCOUT_VALIDATION_", env_file=".env", extra="ignore")

    # Service Info
    service_name: str = "scouter-validation-engine"
    environment: str = "local"
    log_level: str = "INFO"
    log_format: str = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
    # Level for the engine's own loggers (validation, orchestration, repositories)
    engine_log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Consensus validation
    consensus_min_scouts: int = 3
    consensus_min_field_support: int = 2

    # Official-record (TBA) validation
    official_min_teams: int = 3
    official_confidence: float = 0.6

    # Season configuration
    default_season_year: int = 2025

    # Orchestration
    validation_batch_size: int = 10

    # Paths
    base_dir: str = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    field_mappings_path: str = os.path.join(base_dir, "validation", "season_mappings.yaml")
    result_store_path: str = "validation_results.jsonl"

settings = Settings()
