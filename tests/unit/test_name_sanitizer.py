"""Unit tests for name sanitizing."""

import re

import pytest

from export_tool.core import name_sanitizer
from export_tool.core.name_sanitizer import (
    ServiceNameRegistry,
    flatten_file_name,
    is_valid_identifier,
    sanitize,
    to_identifier,
)
from export_tool.models.manifest import Component


class TestSanitize:
    """Tests for escaped code point decoding."""

    def test_decodes_escaped_code_points(self):
        assert sanitize("2048\\u5e94\\u7528") == "2048应用"

    def test_decodes_double_backslash_marker(self):
        assert sanitize("app\\\\u4e2d") == "app中"

    def test_keeps_surrounding_text(self):
        assert sanitize("pre-\\u6d4b-post") == "pre-测-post"

    def test_strips_whitespace(self):
        assert sanitize("  web  ") == "web"

    def test_incomplete_marker_is_literal(self):
        assert sanitize("a\\uZZ") == "a\\uZZ"

    def test_joins_escaped_surrogate_pair(self):
        assert sanitize("app\\ud83d\\ude00") == "app\U0001f600"

    def test_unpaired_surrogate_is_replaced(self):
        assert sanitize("a\\ud83db") == "a\ufffdb"
        assert sanitize("\\ude00x") == "\ufffdx"

    def test_empty(self):
        assert sanitize("") == ""


class TestToIdentifier:
    """Tests for identifier conversion."""

    def test_plain_name_unchanged(self):
        assert to_identifier("web-1.0_a") == "web-1.0_a"

    def test_cjk_is_romanized(self):
        assert to_identifier("测试") == "ceshi"

    def test_escaped_cjk_is_romanized(self):
        assert to_identifier("2048\\u5e94\\u7528") == "2048yingyong"

    def test_disallowed_characters_become_underscore(self):
        assert to_identifier("my app!") == "my_app_"
        assert to_identifier("café") == "caf_"

    def test_empty_name_falls_back(self):
        assert to_identifier("") == "_"
        assert to_identifier("   ") == "_"

    def test_romanization_failure_becomes_underscore(self, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("dictionary missing")

        monkeypatch.setattr(name_sanitizer, "lazy_pinyin", broken)
        assert to_identifier("a测") == "a_"

    @pytest.mark.parametrize("name", ["测试", "2048\\u5e94\\u7528", "a b/c", "", "ü"])
    def test_result_is_always_valid(self, name):
        assert is_valid_identifier(to_identifier(name))


class TestIsValidIdentifier:
    """Tests for the identifier check."""

    def test_valid(self):
        assert is_valid_identifier("a.b-c_1")

    def test_invalid(self):
        assert not is_valid_identifier("")
        assert not is_valid_identifier("a b")
        assert not is_valid_identifier("测试")
        assert not is_valid_identifier("abc\n")


class TestFlattenFileName:
    """Tests for flat file names of image references and paths."""

    def test_image_reference(self):
        assert flatten_file_name("goodrain.me/percona-mysql:5.5_latest") == "percona-mysql--5.5_latest"

    def test_remote_path(self):
        path = "/app_publish/vzrd9po6/9d2635a7c59d4974bb4dc62f04/v1.0_20180207165207.tgz"
        assert flatten_file_name(path) == "v1.0_20180207165207.tgz"

    def test_trailing_slash_keeps_whole_path(self):
        assert flatten_file_name("/a/b/") == "---a---b---"

    def test_whitespace_removed(self):
        assert flatten_file_name("dir/my file:1") == "myfile--1"

    def test_empty(self):
        assert flatten_file_name("") == ""


class TestServiceNameRegistry:
    """Tests for unique service names."""

    def test_unique_names_kept(self):
        registry = ServiceNameRegistry.build([
            Component(name="db", share_id="1"),
            Component(name="web", share_id="2"),
        ])

        assert registry.get("1") == "db"
        assert registry.get("2") == "web"
        assert len(registry) == 2
        assert "1" in registry
        assert registry.get("missing") is None

    def test_identical_display_names_get_suffix(self):
        registry = ServiceNameRegistry.build([
            Component(name="测试", share_id="a"),
            Component(name="测试", share_id="b"),
        ])

        first, second = registry.get("a"), registry.get("b")
        assert first == "ceshi"
        assert re.match(r"^ceshi-[0-9a-f]{4}$", second)
        assert first != second
        assert is_valid_identifier(first) and is_valid_identifier(second)

    def test_suffix_redrawn_until_unique(self, monkeypatch):
        suffixes = iter(["aaaa", "aaaa", "bbbb"])
        monkeypatch.setattr(name_sanitizer, "_random_suffix", lambda: next(suffixes))

        registry = ServiceNameRegistry.build([
            Component(name="x", share_id="1"),
            Component(name="x", share_id="2"),
            Component(name="x", share_id="3"),
        ])

        assert registry.names() == ["x", "x-aaaa", "x-bbbb"]

    def test_names_follow_manifest_order(self):
        registry = ServiceNameRegistry.build([
            Component(name="b", share_id="2"),
            Component(name="a", share_id="1"),
        ])

        assert list(registry) == ["2", "1"]
        assert registry.names() == ["b", "a"]
