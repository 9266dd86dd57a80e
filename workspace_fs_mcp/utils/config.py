"""Service configuration definition."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceConfig(BaseSettings):
    """
    Defines the configuration for the MCP server, loaded from environment
    variables or a .env file.
    """

    # Environment loading is handled explicitly in main.py via load_dotenv,
    # so no env_file is configured here.
    model_config = SettingsConfigDict(extra="ignore")

    # MCP Server transport mechanism (e.g., "stdio", "sse", "streamable-http")
    MCP_TRANSPORT: str = "stdio"
    # Host for the MCP server to bind to. Defaults to 0.0.0.0 for accessibility.
    MCP_HOST: str = "0.0.0.0"
    # Port for the MCP server to listen on.
    MCP_PORT: int = 8670
    # Directory opened by `workspace open` when no path is given.
    WORKSPACE_ROOT: str | None = None
    # "local" serves the host file system, "memory" a throwaway in-memory tree.
    STORAGE_BACKEND: Literal["local", "memory"] = "local"
