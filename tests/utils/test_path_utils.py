#!/usr/bin/env python3
"""
Unit тесты для utils/path_utils.py
"""

import pytest

from workspace_fs_mcp.utils.path_utils import (
    is_same_or_descendant,
    join_path,
    normalize_path,
    parent_path,
    split_path,
)


class TestPathUtils:
    """Тесты для функций работы с путями"""

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("", "/"),
            ("/", "/"),
            ("//", "/"),
            ("a.txt", "/a.txt"),
            ("/src//lib/", "/src/lib"),
            ("  /src  ", "/src"),
        ],
    )
    def test_normalize_path(self, path, expected):
        """Тест: нормализация путей"""
        assert normalize_path(path) == expected

    def test_join_path(self):
        """Тест: соединение пути без двойных слешей"""
        assert join_path("/", "a.txt") == "/a.txt"
        assert join_path("/src", "a.txt") == "/src/a.txt"
        assert join_path("/src/", "a.txt") == "/src/a.txt"

    def test_split_path(self):
        """Тест: разбиение пути на родителя и имя"""
        assert split_path("/") is None
        assert split_path("/a.txt") == ("/", "a.txt")
        assert split_path("src/lib/a.txt") == ("/src/lib", "a.txt")
        assert parent_path("/src/a.txt") == "/src"
        assert parent_path("/") is None

    def test_is_same_or_descendant(self):
        """Тест: проверка вложенности не путает общий префикс"""
        assert is_same_or_descendant("/src", "/src") is True
        assert is_same_or_descendant("/src/a.txt", "/src") is True
        assert is_same_or_descendant("/src.txt", "/src") is False
        assert is_same_or_descendant("/anything", "/") is True
