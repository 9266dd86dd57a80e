#!/usr/bin/env python3
"""
Unit тесты для services/intent_interpreter.py
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from workspace_fs_mcp.filesystem.manager import FileSystemManager
from workspace_fs_mcp.models.results import ChangeKind
from workspace_fs_mcp.models.session import WorkspaceSession
from workspace_fs_mcp.services.file_operations import FileOperationsService
from workspace_fs_mcp.services.intent_interpreter import IntentInterpreter
from workspace_fs_mcp.storage.memory import InMemoryStorageProvider


class TestIntentInterpreter:
    """Тесты для IntentInterpreter"""

    @pytest.fixture
    def manager(self):
        """Создает FileSystemManager поверх in-memory провайдера"""
        return FileSystemManager(InMemoryStorageProvider(), WorkspaceSession())

    @pytest.fixture
    def listener(self):
        """Создает mock слушателя изменений"""
        return MagicMock()

    @pytest.fixture
    def interpreter(self, manager, listener):
        """Создает экземпляр IntentInterpreter"""
        return IntentInterpreter(FileOperationsService(manager, listener))

    @pytest.mark.asyncio
    async def test_create_file_with_content(self, manager, interpreter, listener):
        """Тест: создание файла с содержимым из сообщения"""
        await manager.open_root()

        result = await interpreter.process_message("create file called test.js with content: console.log(1)")

        assert result.operation_performed is True
        assert "test.js" in result.response
        assert await manager.read_file("/test.js") == "console.log(1)"
        listener.assert_called_once_with(ChangeKind.CREATE, "/test.js")

    @pytest.mark.asyncio
    async def test_create_file_in_current_directory(self, manager, interpreter):
        """Тест: файл создается в текущей директории"""
        await manager.open_root()
        await manager.create_directory("/", "src")

        result = await interpreter.process_message("new file named app.py", current_directory="/src")

        assert result.operation_performed is True
        assert await manager.read_file("/src/app.py") == ""

    @pytest.mark.asyncio
    async def test_create_file_with_fenced_content(self, manager, interpreter):
        """Тест: маркеры ``` не попадают в файл"""
        await manager.open_root()

        await interpreter.process_message("create file called a.js with content: ```js\nlet a = 1;\n```")

        assert await manager.read_file("/a.js") == "let a = 1;\n"

    @pytest.mark.asyncio
    async def test_create_file_without_filename(self, interpreter, listener):
        """Тест: без имени файла запрашивается уточнение"""
        result = await interpreter.process_message("please create file")

        assert result.operation_performed is False
        assert "need a filename" in result.response
        listener.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_file_without_workspace(self, interpreter):
        """Тест: без открытого корня создание файла не выполняется"""
        result = await interpreter.process_message("create file called a.js")

        assert result.operation_performed is False
        assert 'couldn\'t create the file "a.js"' in result.response

    @pytest.mark.asyncio
    async def test_update_current_file(self, manager, interpreter, listener):
        """Тест: обновление текущего файла"""
        await manager.open_root()
        await manager.create_file("/", "main.py", "old")

        result = await interpreter.process_message(
            "update the file with content: print(1)", current_file="/main.py"
        )

        assert result.operation_performed is True
        assert "/main.py" in result.response
        assert await manager.read_file("/main.py") == "print(1)"
        listener.assert_called_once_with(ChangeKind.UPDATE, "/main.py")

    @pytest.mark.asyncio
    async def test_update_wins_over_later_create(self, manager, interpreter):
        """Тест: сообщение, начинающееся с update, обновляет текущий файл"""
        await manager.open_root()
        await manager.create_file("/", "main.py", "old")

        result = await interpreter.process_message(
            "update the file with new content and create file called x", current_file="/main.py"
        )

        # "with new content" is not the content phrase, so only a clarification comes back.
        assert result.operation_performed is False
        assert "need the new content" in result.response
        assert await manager.resolve_file("/x") is None

    @pytest.mark.asyncio
    async def test_update_without_open_file(self, interpreter):
        """Тест: обновление без открытого файла"""
        result = await interpreter.process_message("update the file with content: x")

        assert result.operation_performed is False
        assert "no file is currently open" in result.response

    @pytest.mark.asyncio
    async def test_update_without_content(self, manager, interpreter):
        """Тест: обновление без содержимого запрашивает уточнение"""
        await manager.open_root()
        await manager.create_file("/", "main.py", "old")

        result = await interpreter.process_message("please modify the file", current_file="/main.py")

        assert result.operation_performed is False
        assert "need the new content" in result.response
        assert await manager.read_file("/main.py") == "old"

    @pytest.mark.asyncio
    async def test_delete_absent_file(self, manager, interpreter, listener):
        """Тест: удаление отсутствующего файла"""
        await manager.open_root()

        result = await interpreter.process_message("delete file called old.js")

        assert result.operation_performed is False
        assert "couldn't delete" in result.response
        listener.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_target_is_relative_to_root(self, manager, interpreter):
        """Тест: путь удаления берется относительно корня, а не текущей директории"""
        await manager.open_root()
        await manager.create_directory("/", "src")
        await manager.create_file("/src", "old.js", "x")

        result = await interpreter.process_message("remove file src/old.js", current_directory="/src")

        assert result.operation_performed is True
        assert await manager.read_file("/src/old.js") is None

    @pytest.mark.asyncio
    async def test_create_directory(self, manager, interpreter, listener):
        """Тест: создание директории"""
        await manager.open_root()

        result = await interpreter.process_message("create folder called components")

        assert result.operation_performed is True
        assert await manager.resolve_directory("/components") is not None
        listener.assert_called_once_with(ChangeKind.CREATE, "/components")

    @pytest.mark.asyncio
    async def test_non_file_message(self, interpreter, listener):
        """Тест: обычное сообщение не является файловой операцией"""
        result = await interpreter.process_message("hello, how are you")

        assert result.response == ""
        assert result.operation_performed is False
        listener.assert_not_called()

    @pytest.mark.asyncio
    async def test_handler_failure_returns_apology(self):
        """Тест: неожиданная ошибка превращается в ответ без операции"""
        operations = MagicMock()
        operations.create_directory = AsyncMock(side_effect=RuntimeError("boom"))
        interpreter = IntentInterpreter(operations)

        result = await interpreter.process_message("create folder assets")

        assert result.operation_performed is False
        assert "encountered an error" in result.response
