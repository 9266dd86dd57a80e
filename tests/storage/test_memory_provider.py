#!/usr/bin/env python3
"""
Unit тесты для storage/memory.py
"""

import pytest

from workspace_fs_mcp.errors import NotFound, PermissionDenied, ProviderError
from workspace_fs_mcp.storage.memory import InMemoryStorageProvider


class TestInMemoryStorageProvider:
    """Тесты для InMemoryStorageProvider"""

    @pytest.fixture
    def provider(self):
        """Создает in-memory провайдер"""
        return InMemoryStorageProvider()

    @pytest.mark.asyncio
    async def test_refused_grant(self):
        """Тест: провайдер без доступа отказывает в открытии корня"""
        with pytest.raises(PermissionDenied):
            await InMemoryStorageProvider(grant_access=False).open_root()

    @pytest.mark.asyncio
    async def test_get_file_without_create_raises_not_found(self, provider):
        """Тест: отсутствующий файл без create дает NotFound"""
        root = await provider.open_root()
        with pytest.raises(NotFound):
            await root.get_file("missing.txt")

    @pytest.mark.asyncio
    async def test_get_file_create_keeps_existing_content(self, provider):
        """Тест: get-or-create не обнуляет существующий файл"""
        root = await provider.open_root()
        handle = await root.get_file("a.txt", create=True)
        await handle.write_text("content")

        again = await root.get_file("a.txt", create=True)

        assert again is handle
        assert await again.read_text() == "content"

    @pytest.mark.asyncio
    async def test_kind_mismatch_raises_provider_error(self, provider):
        """Тест: файл нельзя открыть как директорию и наоборот"""
        root = await provider.open_root()
        await root.get_file("a.txt", create=True)
        await root.get_directory("src", create=True)

        with pytest.raises(ProviderError):
            await root.get_directory("a.txt")
        with pytest.raises(ProviderError):
            await root.get_file("src")

    @pytest.mark.asyncio
    async def test_entries_keep_insertion_order(self, provider):
        """Тест: перечисление в порядке добавления"""
        root = await provider.open_root()
        await root.get_file("b.txt", create=True)
        await root.get_directory("a", create=True)

        entries = [(name, handle.kind) async for name, handle in root.entries()]

        assert entries == [("b.txt", "file"), ("a", "directory")]

    @pytest.mark.asyncio
    async def test_remove_non_empty_directory_requires_recursive(self, provider):
        """Тест: непустая директория удаляется только рекурсивно"""
        root = await provider.open_root()
        src = await root.get_directory("src", create=True)
        await src.get_file("a.txt", create=True)

        with pytest.raises(ProviderError):
            await root.remove_entry("src")

        await root.remove_entry("src", recursive=True)
        with pytest.raises(NotFound):
            await root.get_directory("src")

    @pytest.mark.asyncio
    async def test_removed_handles_are_detached(self, provider):
        """Тест: handle удаленной записи больше не работает"""
        root = await provider.open_root()
        src = await root.get_directory("src", create=True)
        file_handle = await src.get_file("a.txt", create=True)

        await root.remove_entry("src", recursive=True)

        with pytest.raises(NotFound):
            await file_handle.read_text()
        with pytest.raises(NotFound):
            await src.get_file("a.txt")

    @pytest.mark.asyncio
    async def test_multi_segment_names_are_refused(self, provider):
        """Тест: имя с '/' или '..' не является именем записи"""
        root = await provider.open_root()

        with pytest.raises(ProviderError):
            await root.get_file("a/b.txt", create=True)
        with pytest.raises(ProviderError):
            await root.get_directory("..", create=True)
        assert [name async for name, _ in root.entries()] == []
