"""htpasswd_store 入口文件

加载 htpasswd 文件并按 check_interval 保持同步
"""

import sys

from loguru import logger
import asyncio
import argparse


def setup_logger(level: str = "INFO") -> None:
    """配置日志输出"""
    logger.remove()
    logger.add(
        sys.stdout,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} <level>[{level}]</level> {message}",
        level=level,
        colorize=True,
    )


async def check_file(path: str) -> int:
    """校验 htpasswd 文件"""
    from htpasswd_store import HtpasswdError, open_htpasswd

    try:
        store = open_htpasswd(path)
    except HtpasswdError as e:
        logger.error(f"校验失败: {e}")
        return 1

    logger.info(f"{store.path} 校验通过，共 {len(store)} 个用户")
    return 0


async def serve(path: str, interval: float) -> int:
    """加载文件并持续自动重载，直到收到退出信号"""
    from htpasswd_store import AutoReloader, open_htpasswd

    store = open_htpasswd(path, check_interval=interval)
    reloader = AutoReloader(store)
    reloader.on_reload(lambda s: logger.info(f"当前用户: {', '.join(s.users()) or '(无)'}"))

    await reloader.start()
    if not reloader.is_running():
        logger.warning("未设置检查间隔，文件变化不会被自动加载")

    try:
        # 保持运行
        while True:
            await asyncio.sleep(3600)
    finally:
        await reloader.stop()


async def show_version():
    """显示版本信息"""
    from htpasswd_store import __version__

    print(f"htpasswd_store {__version__}")
    return 0


async def show_help():
    """显示帮助信息"""
    help_text = """
htpasswd_store - 基于 htpasswd 文件的内存凭据存储

用法:
    python main.py [命令] [选项]

可用命令:
    (默认), serve     加载文件并按间隔自动重载
    check             校验 htpasswd 文件格式
    version, -v       显示版本信息
    help, -h          显示帮助信息

选项:
    -c, --config      配置文件路径（默认 data/config.json）
    -f, --file        htpasswd 文件路径，覆盖配置文件
    -i, --interval    检查间隔（秒），覆盖配置文件

示例:
    python main.py check -f .htpasswd
    python main.py serve -f .htpasswd -i 30
"""
    print(help_text)
    return 0


async def main():
    """主函数：启动自动重载或执行命令行操作"""
    # 解析命令行参数
    parser = argparse.ArgumentParser(
        description="htpasswd_store 命令行工具",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-h", "--help",
        action="store_true",
        dest="show_help",
        help="显示帮助信息"
    )
    parser.add_argument(
        "-v", "--version",
        action="store_true",
        dest="show_version",
        help="显示版本信息"
    )
    parser.add_argument("-c", "--config", default=None, help="配置文件路径")
    parser.add_argument("-f", "--file", default=None, help="htpasswd 文件路径")
    parser.add_argument("-i", "--interval", type=float, default=None, help="检查间隔（秒）")
    parser.add_argument(
        "command",
        nargs="?",
        choices=["serve", "check", "version", "help"],
        help="要执行的命令"
    )

    args = parser.parse_args()

    # 优先处理短选项
    if args.show_help or args.command == "help":
        return await show_help()
    if args.show_version or args.command == "version":
        return await show_version()

    from htpasswd_store.config import load_config

    config = load_config(args.config)
    setup_logger(config.log_level)

    path = args.file or config.path
    interval = args.interval if args.interval is not None else config.check_interval

    if args.command == "check":
        return await check_file(path)

    # 默认启动自动重载
    logger.info(f"加载 {path}...")
    return await serve(path, interval)


if __name__ == "__main__":
    setup_logger()
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code if exit_code is not None else 0)
    except KeyboardInterrupt:
        logger.info("收到退出信号，正在退出...")
    except Exception as e:
        logger.error(f"操作失败: {e}")
        sys.exit(1)
