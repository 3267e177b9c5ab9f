"""
Lua language plugin package.
"""

from plugins.lua.plugin import LuaPlugin

__all__ = ['LuaPlugin']
