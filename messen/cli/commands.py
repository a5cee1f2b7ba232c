"""
CLI 命令模块 - messen 的命令行嵌入应用。

本模块使用 Typer 框架定义 messen 的 CLI 命令：
- login：登录并显示当前用户和线程数量
- listen：登录（优先缓存）后打印收到的消息和线程事件，Ctrl+C 退出
- logout：登出并清除缓存的 app state
- status：查看配置文件和 app state 文件状态

技术栈：
- Typer：CLI 框架（基于 Click，支持类型注解自动生成帮助文档）
- Rich：终端美化输出

CLI 作为嵌入应用提供 Messen 需要的全部能力：
- prompt_credentials / get_mfa_code：通过 typer.prompt 隐藏输入
- on_message / on_thread_event：打印到终端

transport 通过配置项 transport（"module:attribute"）指定，
该属性应是一个无参可调用对象（通常是 Transport 子类本身），返回 Transport 实例。
"""

import asyncio

import typer
from rich.console import Console

from messen import __logo__, __version__
from messen.bus.events import MessageEvent, ThreadEvent
from messen.config.schema import MessenConfig
from messen.types import Credentials

# 创建 Typer 应用实例（CLI 根命令）
app = typer.Typer(
    name="messen",
    help=f"{__logo__} messen - chat session manager",
    no_args_is_help=True,  # 无参数时显示帮助信息
)

console = Console()  # Rich 控制台实例，用于美化输出


def version_callback(value: bool):
    """版本号回调：当用户传入 --version/-v 参数时，打印版本号并退出。"""
    if value:
        console.print(f"{__logo__} messen v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """messen CLI 根命令回调。处理全局选项（如 --version）。"""
    pass


# ============================================================================
# 嵌入能力
# ============================================================================


def _make_prompt(email: str | None):
    """构造交互式凭据输入能力。已通过 --email 指定账号时只询问密码。"""
    def prompt_credentials() -> Credentials:
        account = email or typer.prompt("Email")
        password = typer.prompt("Password", hide_input=True)
        return Credentials(email=account, password=password)
    return prompt_credentials


def _prompt_mfa_code() -> str:
    return typer.prompt("Two-factor code", hide_input=True)


def _print_message(event: MessageEvent) -> None:
    """以一致的终端样式打印消息事件。"""
    title = event.thread.name or event.thread_id
    console.print(f"[cyan]{title}[/cyan] [dim]{event.sender_id}[/dim]: {event.body}")


def _print_thread_event(event: ThreadEvent) -> None:
    title = event.thread.name or event.thread_id
    console.print(f"[yellow]{title}[/yellow] [dim]{event.log_message_type or 'event'}[/dim]")


def _load_cli_config(debug: bool) -> MessenConfig:
    """加载配置并打开日志输出。"""
    from messen.config.loader import load_config
    from messen.utils.helpers import setup_logging

    config = load_config()
    if debug:
        config = config.model_copy(update={"debug": True})
    setup_logging(debug=config.debug, production=config.is_production)
    return config


def _make_messen(config: MessenConfig, email: str | None = None):
    """根据配置构造 transport 和 Messen 实例。"""
    from messen.session.messen import Messen
    from messen.utils.helpers import import_object

    if not config.transport:
        console.print("[red]No transport configured.[/red] Set 'transport' in ~/.messen/config.json "
                      "or MESSEN_TRANSPORT=module:attribute")
        raise typer.Exit(1)

    try:
        factory = import_object(config.transport)
    except (ImportError, AttributeError, ValueError) as e:
        console.print(f"[red]Cannot load transport {config.transport}: {e}[/red]")
        raise typer.Exit(1)

    return Messen(
        factory(),
        prompt_credentials=_make_prompt(email),
        get_mfa_code=_prompt_mfa_code,
        on_message=_print_message,
        on_thread_event=_print_thread_event,
        config=config,
    )


def _run(coro) -> None:
    """运行协程，把 messen 异常转换为友好的错误输出和非零退出码。"""
    from messen.errors import MessenError

    try:
        asyncio.run(coro)
    except (MessenError, NotImplementedError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


# ============================================================================
# 会话命令
# ============================================================================


@app.command()
def login(
    email: str = typer.Option(None, "--email", "-e", help="Account email (password is prompted)"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Ignore cached app state"),
    debug: bool = typer.Option(False, "--debug", help="Verbose transport and messen logs"),
):
    """
    登录并缓存 app state。

    参数:
        email: 账号（指定后只提示输入密码）
        no_cache: 忽略已缓存的 app state，强制使用凭据登录
        debug: 打开详细日志
    """
    config = _load_cli_config(debug)
    messen = _make_messen(config, email)

    async def run():
        user = await messen.login(use_cache=not no_cache)
        console.print(f"[green]✓[/green] Logged in as [bold]{user.name or user.id}[/bold]")
        console.print(f"  Friends: {len(user.friends)}")
        console.print(f"  Threads: {len(messen.threads or [])}")

    _run(run())


@app.command()
def listen(
    debug: bool = typer.Option(False, "--debug", help="Verbose transport and messen logs"),
):
    """
    登录后持续打印收到的消息和线程事件，Ctrl+C 退出（不会登出）。
    """
    config = _load_cli_config(debug)
    messen = _make_messen(config)

    async def run():
        user = await messen.login()
        console.print(f"{__logo__} Listening as [bold]{user.name or user.id}[/bold] "
                      "(press [bold]Ctrl+C[/bold] to stop)\n")
        dispatcher = messen.listen()
        try:
            await asyncio.Event().wait()
        finally:
            messen.stop_listening()
            await dispatcher.drain()

    try:
        _run(run())
    except KeyboardInterrupt:
        console.print("\nGoodbye!")


@app.command()
def logout(
    debug: bool = typer.Option(False, "--debug", help="Verbose transport and messen logs"),
):
    """
    登出并清除缓存的 app state。

    只用缓存的 app state 恢复会话后再登出；没有可用缓存时不会提示输入密码。
    """
    from messen.errors import AppStateNotFoundError
    from messen.store.appstate import AppStateStore

    config = _load_cli_config(debug)
    store = AppStateStore(config.appstate_path)

    async def run():
        try:
            await store.load()
        except AppStateNotFoundError:
            # 损坏的状态文件一并删除
            await store.clear()
            console.print("[yellow]No cached session[/yellow], nothing to log out")
            return
        messen = _make_messen(config)
        await messen.login(use_cache=True)
        await messen.logout()
        console.print("[green]✓[/green] Logged out")

    _run(run())


# ============================================================================
# Status Commands
# ============================================================================


@app.command()
def status():
    """
    显示 messen 状态。

    展示内容：
    - 配置文件路径和状态
    - app state 文件路径和状态
    - 配置的 transport
    """
    from messen.config.loader import get_config_path, load_config

    config_path = get_config_path()
    config = load_config()
    appstate = config.appstate_path

    console.print(f"{__logo__} messen Status\n")

    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")
    console.print(f"App state: {appstate} {'[green]✓[/green]' if appstate.exists() else '[dim]not cached[/dim]'}")
    console.print(f"Transport: {config.transport or '[dim]not set[/dim]'}")
    console.print(f"Environment: {config.environment}{' (debug)' if config.debug else ''}")


if __name__ == "__main__":
    app()
