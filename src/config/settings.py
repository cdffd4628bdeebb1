"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MARKUPTREE_ prefix (e.g., MARKUPTREE_MAX_DEPTH=64).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MARKUPTREE_ prefix.

    Examples:
        MARKUPTREE_MAX_DEPTH=64
        MARKUPTREE_RENDER_IN_WRAPPER=false
        MARKUPTREE_STRICT_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="MARKUPTREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Tree builder configuration
    max_depth: int = Field(
        default=256,
        ge=1,
        description="Maximum element nesting depth accepted by the tree builder",
    )

    style_attribute: str = Field(
        default="style",
        description="Attribute whose string value is parsed into a style map",
    )

    # Expression evaluator configuration
    expression_max_length: int = Field(
        default=10000,
        ge=1,
        description="Longest expression source the sandboxed evaluator accepts",
    )

    expression_max_nesting: int = Field(
        default=64,
        ge=1,
        description="Deepest bracket/parenthesis nesting inside one expression",
    )

    # Renderer configuration
    render_in_wrapper: bool = Field(
        default=True,
        description="Wrap rendered sibling lists in a container element",
    )

    wrapper_class: str = Field(
        default="markuptree",
        description="CSS class of the wrapper element emitted by the renderer",
    )

    # CLI configuration
    debug_mode: bool = Field(
        default=False,
        description="Log every scanned tag while parsing",
    )

    strict_mode: bool = Field(
        default=False,
        description="Strict mode: fail the CLI run when unrecognized tags are found",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
