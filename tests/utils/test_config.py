#!/usr/bin/env python3
"""
Unit тесты для utils/config.py и utils/session_manager.py
"""

import pytest
from pydantic import ValidationError

from workspace_fs_mcp.utils.config import ServiceConfig
from workspace_fs_mcp.utils.session_manager import SessionManager


class TestServiceConfig:
    """Тесты для ServiceConfig"""

    def test_defaults(self, monkeypatch):
        """Тест: значения по умолчанию"""
        for name in ("MCP_TRANSPORT", "MCP_HOST", "MCP_PORT", "WORKSPACE_ROOT", "STORAGE_BACKEND"):
            monkeypatch.delenv(name, raising=False)

        config = ServiceConfig()

        assert config.MCP_TRANSPORT == "stdio"
        assert config.MCP_PORT == 8670
        assert config.WORKSPACE_ROOT is None
        assert config.STORAGE_BACKEND == "local"

    def test_environment_overrides(self, monkeypatch):
        """Тест: значения берутся из окружения"""
        monkeypatch.setenv("MCP_PORT", "9000")
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("WORKSPACE_ROOT", "/tmp/project")

        config = ServiceConfig()

        assert config.MCP_PORT == 9000
        assert config.STORAGE_BACKEND == "memory"
        assert config.WORKSPACE_ROOT == "/tmp/project"

    def test_unknown_backend_is_rejected(self, monkeypatch):
        """Тест: неизвестный backend отклоняется"""
        monkeypatch.setenv("STORAGE_BACKEND", "s3")

        with pytest.raises(ValidationError):
            ServiceConfig()


class TestSessionManager:
    """Тесты для SessionManager"""

    def test_same_id_returns_same_session(self):
        """Тест: один id дает одну и ту же сессию"""
        manager = SessionManager()

        assert manager.get_session("a") is manager.get_session("a")
        assert manager.get_session("a") is not manager.get_session("b")
        assert manager.get_session() is manager.get_session("default")
