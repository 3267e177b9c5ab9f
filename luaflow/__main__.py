from luaflow.cli import run

run()
