"""CLI 模块 - messen 命令行入口（Typer 应用定义在 commands.py 中）。"""
