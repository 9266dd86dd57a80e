#!/usr/bin/env python3
"""
Unit тесты для services/intent_rules.py
"""

import pytest

from workspace_fs_mcp.services import intent_rules
from workspace_fs_mcp.services.intent_rules import (
    Intent,
    classify_intent,
    extract_content,
    extract_delete_target,
    extract_directory_name,
    extract_filename,
    strip_code_fences,
)


class TestClassifyIntent:
    """Тесты для classify_intent"""

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("create file called a.js", Intent.CREATE_FILE),
            ("Please make a file named notes.txt", Intent.CREATE_FILE),
            ("I need a NEW FILE called x.py", Intent.CREATE_FILE),
            ("modify the code with content: x = 1", Intent.UPDATE_FILE),
            ("change this file with content: y", Intent.UPDATE_FILE),
            ("delete file old.js", Intent.DELETE_FILE),
            ("remove file src/old.js", Intent.DELETE_FILE),
            ("create folder assets", Intent.CREATE_DIRECTORY),
            ("new directory called docs", Intent.CREATE_DIRECTORY),
            ("hello, how are you", Intent.NONE),
            ("update me on the weather", Intent.NONE),
        ],
    )
    def test_classification(self, message, expected):
        """Тест: классификация типичных сообщений"""
        assert classify_intent(message) is expected

    def test_update_request_mentioning_create_file_stays_update(self):
        """Тест: 'update the file ... and create file called x' классифицируется как update"""
        message = "update the file with new content and create file called x"
        assert classify_intent(message) is Intent.UPDATE_FILE

    def test_create_request_mentioning_change_stays_create(self):
        """Тест: запрос на создание, в котором позже упоминается change"""
        message = "create file called notes.txt and change the code later"
        assert classify_intent(message) is Intent.CREATE_FILE

    def test_delete_before_create_directory(self):
        """Тест: первым упомянутый delete выигрывает у create folder"""
        assert classify_intent("delete file a.txt then create folder b") is Intent.DELETE_FILE


class TestExtractors:
    """Тесты для функций извлечения параметров"""

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("create file called test.js", "test.js"),
            ("create a file named 'report.md'", "report.md"),
            ('new file "main_v2.py" please', "main_v2.py"),
            ("make a file index.html", "index.html"),
            ("create a file", None),
        ],
    )
    def test_extract_filename(self, message, expected):
        """Тест: извлечение имени файла"""
        assert extract_filename(message) == expected

    def test_extract_content_after_colon(self):
        """Тест: содержимое после 'with content:'"""
        assert extract_content("create file a.js with content: console.log(1)") == "console.log(1)"

    def test_extract_content_with_the_and_of(self):
        """Тест: 'with the content of' тоже распознается"""
        assert extract_content("update the file with the content of x = 1\ny = 2") == "x = 1\ny = 2"

    def test_extract_content_missing(self):
        """Тест: без фразы 'with content' содержимого нет"""
        assert extract_content("update the file please") is None

    def test_extract_content_strips_fences(self):
        """Тест: маркеры ``` удаляются"""
        message = "create file a.js with content: ```js\nconsole.log(1)\n```"
        assert extract_content(message) == "console.log(1)\n"

    def test_strip_code_fences_leaves_plain_text(self):
        """Тест: текст без маркеров не меняется"""
        assert strip_code_fences("a = 1") == "a = 1"

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("delete file called old.js", "old.js"),
            ("delete the file src/utils/old.js", "src/utils/old.js"),
            ("remove file named 'a.txt'", "a.txt"),
            ("delete file", None),
        ],
    )
    def test_extract_delete_target(self, message, expected):
        """Тест: извлечение пути удаляемого файла"""
        assert extract_delete_target(message) == expected

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("create folder called components", "components"),
            ("new directory named 'lib'", "lib"),
            ("create a directory assets", "assets"),
            ("create folder", None),
        ],
    )
    def test_extract_directory_name(self, message, expected):
        """Тест: извлечение имени директории"""
        assert extract_directory_name(message) == expected


class TestIntentTieBreak:
    """Тесты для порядка интентов при совпадающей позиции"""

    def test_equal_positions_follow_fixed_order(self, monkeypatch):
        """Тест: при равных позициях побеждает интент, стоящий раньше в таблице"""
        def always_first(text):
            return 0

        monkeypatch.setattr(
            intent_rules,
            "INTENT_PREDICATES",
            (
                (Intent.UPDATE_FILE, always_first),
                (Intent.CREATE_FILE, always_first),
            ),
        )

        assert classify_intent("anything") is Intent.UPDATE_FILE

    def test_real_keywords_tie_resolves_to_create(self, monkeypatch):
        """Тест: create и update на одной позиции дают create_file"""
        monkeypatch.setattr(intent_rules, "UPDATE_VERBS", ("update", "modify", "change", "create"))

        assert classify_intent("create file called x") is Intent.CREATE_FILE
