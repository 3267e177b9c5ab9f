"""Unit tests for PluginManager."""

import pytest
from typing import List

from plugins import PluginManager, LanguagePlugin, create_plugin_manager
from luaflow.models import Chunk, OtherNode, SyntaxNode


class MockLuaPlugin(LanguagePlugin):
    """Mock Lua plugin for testing."""

    @property
    def language_name(self) -> str:
        return "lua"

    @property
    def file_extensions(self) -> List[str]:
        return [".lua"]

    def parse_syntax(self, file_path: str, content: str) -> SyntaxNode:
        return SyntaxNode(
            node_type="chunk",
            start_line=1,
            end_line=1,
            start_column=0,
            end_column=0,
            children=[],
            text=content
        )

    def build_ast(self, syntax: SyntaxNode) -> Chunk:
        return Chunk(body=[])


class MockMoonPlugin(LanguagePlugin):
    """Mock MoonScript plugin for testing."""

    @property
    def language_name(self) -> str:
        return "moonscript"

    @property
    def file_extensions(self) -> List[str]:
        return [".moon", ".yue"]

    def parse_syntax(self, file_path: str, content: str) -> SyntaxNode:
        return SyntaxNode(
            node_type="File",
            start_line=1,
            end_line=1,
            start_column=0,
            end_column=0,
            children=[],
            text=content
        )

    def build_ast(self, syntax: SyntaxNode) -> Chunk:
        return Chunk(body=[OtherNode(kind=syntax.node_type)])


class TestPluginManager:
    """Test cases for PluginManager."""

    def test_register_plugin(self):
        """Test plugin registration."""
        manager = PluginManager()
        manager.register_plugin(MockLuaPlugin())

        assert "lua" in manager.list_supported_languages()
        assert ".lua" in manager.list_supported_extensions()

    def test_get_plugin_for_file(self):
        """Test getting plugin by file extension."""
        manager = PluginManager()
        manager.register_plugin(MockLuaPlugin())
        manager.register_plugin(MockMoonPlugin())

        plugin = manager.get_plugin_for_file("scripts/main.lua")
        assert plugin is not None
        assert plugin.language_name == "lua"

        plugin = manager.get_plugin_for_file("scripts/init.moon")
        assert plugin is not None
        assert plugin.language_name == "moonscript"

        # Extension lookup is case-insensitive
        plugin = manager.get_plugin_for_file("scripts/GAME.LUA")
        assert plugin is not None
        assert plugin.language_name == "lua"

        assert manager.get_plugin_for_file("scripts/tool.py") is None

    def test_get_plugin_by_name(self):
        """Test getting plugin by language name."""
        manager = PluginManager()
        manager.register_plugin(MockLuaPlugin())

        retrieved = manager.get_plugin("lua")
        assert retrieved is not None
        assert retrieved.language_name == "lua"

        assert manager.get_plugin("python") is None

    def test_unregister_plugin(self):
        """Test plugin unregistration."""
        manager = PluginManager()
        manager.register_plugin(MockLuaPlugin())

        assert manager.unregister_plugin("lua") is True
        assert "lua" not in manager.list_supported_languages()
        assert ".lua" not in manager.list_supported_extensions()

        assert manager.unregister_plugin("lua") is False

    def test_multiple_extensions_same_language(self):
        """Test plugin with multiple file extensions."""
        manager = PluginManager()
        manager.register_plugin(MockMoonPlugin())

        assert manager.get_plugin_for_file("a.moon") is manager.get_plugin_for_file("b.yue")

    def test_plugin_override(self):
        """Test that registering a plugin twice keeps the second one."""
        manager = PluginManager()
        plugin1 = MockLuaPlugin()
        plugin2 = MockLuaPlugin()

        manager.register_plugin(plugin1)
        manager.register_plugin(plugin2)

        assert manager.get_plugin("lua") is plugin2

    def test_get_statistics(self):
        """Test getting plugin manager statistics."""
        manager = PluginManager()

        stats = manager.get_statistics()
        assert stats["total_plugins"] == 0
        assert stats["total_extensions"] == 0
        assert stats["languages"] == []

        manager.register_plugin(MockLuaPlugin())
        manager.register_plugin(MockMoonPlugin())

        stats = manager.get_statistics()
        assert stats["total_plugins"] == 2
        assert stats["total_extensions"] == 3  # .lua, .moon, .yue
        assert "lua" in stats["languages"]
        assert "moonscript" in stats["languages"]

    def test_parse_file_chains_syntax_and_lowering(self):
        """Test the base class parse_file runs parse_syntax then build_ast."""
        chunk = MockMoonPlugin().parse_file("init.moon", "x = 1")

        assert isinstance(chunk, Chunk)
        assert chunk.body[0].kind == "File"

    def test_load_plugin_config(self, tmp_path):
        """Test loading plugin configuration from YAML."""
        manager = PluginManager()
        plugin_dir = tmp_path / "test_plugin"
        plugin_dir.mkdir()

        (plugin_dir / "config.yaml").write_text("""
name: test
version: 1.0.0
file_extensions:
  - .test
statement_kinds:
  do_statement: DoStatement
""")

        config = manager.load_plugin_config(plugin_dir)

        assert config["name"] == "test"
        assert config["version"] == "1.0.0"
        assert ".test" in config["file_extensions"]
        assert config["statement_kinds"]["do_statement"] == "DoStatement"

        # Second load is served from the cache
        (plugin_dir / "config.yaml").write_text("name: changed")
        assert manager.load_plugin_config(plugin_dir)["name"] == "test"

    def test_load_plugin_config_missing_file(self, tmp_path):
        """Test loading config from directory without config.yaml."""
        manager = PluginManager()
        plugin_dir = tmp_path / "no_config"
        plugin_dir.mkdir()

        with pytest.raises(FileNotFoundError):
            manager.load_plugin_config(plugin_dir)

    def test_load_plugin_config_invalid_yaml(self, tmp_path):
        """Test loading invalid YAML configuration."""
        manager = PluginManager()
        plugin_dir = tmp_path / "bad_config"
        plugin_dir.mkdir()
        (plugin_dir / "config.yaml").write_text("invalid: yaml: content: [")

        with pytest.raises(Exception):  # yaml.YAMLError
            manager.load_plugin_config(plugin_dir)

    def test_load_plugin_config_missing_required_fields(self, tmp_path):
        """Test loading config with missing required fields."""
        manager = PluginManager()
        plugin_dir = tmp_path / "incomplete_config"
        plugin_dir.mkdir()
        (plugin_dir / "config.yaml").write_text("""
name: test
# Missing version and file_extensions
""")

        with pytest.raises(ValueError):
            manager.load_plugin_config(plugin_dir)

    def test_discover_plugin_configs(self, tmp_path):
        """Test plugin configuration discovery from a directory."""
        manager = PluginManager()

        lua_dir = tmp_path / "lua"
        lua_dir.mkdir()
        (lua_dir / "config.yaml").write_text("""
name: lua
version: 1.0.0
file_extensions:
  - .lua
""")

        broken_dir = tmp_path / "broken"
        broken_dir.mkdir()
        (broken_dir / "config.yaml").write_text("name: broken")

        (tmp_path / "empty").mkdir()
        (tmp_path / "README.txt").write_text("not a plugin")

        configs = manager.discover_plugin_configs(tmp_path)

        assert [config["name"] for config in configs] == ["lua"]

    def test_discover_plugin_configs_missing_directory(self, tmp_path):
        """Test discovery in a directory that does not exist."""
        manager = PluginManager()
        assert manager.discover_plugin_configs(tmp_path / "missing") == []

    def test_discover_builtin_plugins(self):
        """Test the bundled Lua plugin configuration is discovered."""
        configs = PluginManager().discover_plugin_configs()
        assert "lua" in [config["name"] for config in configs]


def test_create_plugin_manager_registers_lua():
    """Test the default manager handles .lua files."""
    manager = create_plugin_manager()

    plugin = manager.get_plugin_for_file("main.lua")
    assert plugin is not None
    assert plugin.language_name == "lua"


def test_create_plugin_manager_uses_discovered_config(tmp_path):
    """Test plugins are built from their validated config.yaml."""
    lua_dir = tmp_path / "lua"
    lua_dir.mkdir()
    (lua_dir / "config.yaml").write_text("""
name: lua
version: 2.0.0
file_extensions:
  - .luau
""")
    moon_dir = tmp_path / "moon"
    moon_dir.mkdir()
    (moon_dir / "config.yaml").write_text("""
name: moonscript
version: 1.0.0
file_extensions:
  - .moon
""")

    manager = create_plugin_manager(tmp_path)

    assert manager.list_supported_languages() == ["lua"]
    assert manager.get_plugin_for_file("game.luau") is not None
    assert manager.get_plugin_for_file("main.lua") is None


def test_create_plugin_manager_skips_invalid_config(tmp_path):
    """Test a config.yaml missing required fields registers nothing."""
    lua_dir = tmp_path / "lua"
    lua_dir.mkdir()
    (lua_dir / "config.yaml").write_text("name: lua\n")

    manager = create_plugin_manager(tmp_path)

    assert manager.get_plugin("lua") is None
