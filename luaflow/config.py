"""
Application configuration management.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from LUAFLOW_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LUAFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "WARNING"

    # Output
    output_file: str = "output.mermaid"
    write_markdown: bool = True
    markdown_fence_language: str = "mermaid"

    # Rendering
    graph_direction: str = "TD"
    render_branch_labels: bool = True

    # Traversal
    label_elseif_conditions: bool = False
    node_id_prefix: str = "node"

    # Parsing
    default_language: str = "lua"


# Global settings instance
settings = Settings()
