"""Application settings configuration."""

from neuroglia.hosting.abstractions import ApplicationSettings


class Settings(ApplicationSettings):
    """Task hierarchy engine settings (overridable through environment variables or .env)."""

    # Debugging Configuration
    debug: bool = True
    environment: str = "development"  # development, production
    log_level: str = "INFO"
    log_file_enabled: bool = False
    log_filename: str = "logs/task-hierarchy.log"

    # Observability Configuration
    service_name: str = "task-hierarchy"
    service_version: str = "1.0.0"

    # Hierarchy Configuration
    max_hierarchy_depth: int = 15  # root = 0

    # Query Configuration
    default_page_size: int = 50
    max_page_size: int = 200
    search_term_max_length: int = 200

    # Timeline Configuration
    timeline_max_range_days: int = 730

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables


app_settings = Settings()
