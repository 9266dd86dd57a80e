"""
Configuration and dependency management for the Workspace MCP server.
"""

import logging
from functools import lru_cache

from workspace_fs_mcp.storage.base import StorageProvider
from workspace_fs_mcp.storage.local import LocalStorageProvider
from workspace_fs_mcp.storage.memory import InMemoryStorageProvider
from workspace_fs_mcp.tools.assistant_tool import AssistantTool
from workspace_fs_mcp.tools.workspace_tool import WorkspaceTool
from workspace_fs_mcp.utils.config import ServiceConfig
from workspace_fs_mcp.utils.session_manager import SessionManager

logger = logging.getLogger(__name__)


@lru_cache
def get_base_config() -> ServiceConfig:
    """
    Retrieves the base server configuration from environment variables.

    This function is cached to avoid repeatedly reading and parsing environment
    variables and .env files.

    Returns:
        A cached instance of the ServiceConfig.
    """
    return ServiceConfig()


@lru_cache
def get_session_manager() -> SessionManager:
    """Returns the singleton SessionManager."""
    logger.info("Initializing SessionManager singleton.")
    return SessionManager()


@lru_cache
def get_storage_provider() -> StorageProvider:
    """Returns the storage provider selected by STORAGE_BACKEND."""
    config = get_base_config()
    if config.STORAGE_BACKEND == "memory":
        logger.info("Initializing in-memory storage provider.")
        return InMemoryStorageProvider()
    logger.info("Initializing local storage provider.")
    return LocalStorageProvider(default_location=config.WORKSPACE_ROOT)


# --- Tool Providers ---


@lru_cache
def get_workspace_tool_provider() -> WorkspaceTool:
    """Returns a cached instance of the WorkspaceTool."""
    logger.info("Initializing WorkspaceTool singleton.")
    return WorkspaceTool(get_storage_provider())


@lru_cache
def get_assistant_tool_provider() -> AssistantTool:
    """Returns a cached instance of the AssistantTool."""
    logger.info("Initializing AssistantTool singleton.")
    return AssistantTool(get_storage_provider())
