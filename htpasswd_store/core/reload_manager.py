"""自动重载管理器

按 HtpasswdFile.check_interval 周期性调用 reload()，让长期运行的服务
无需重启即可感知凭据文件的变化
"""

import asyncio
import inspect
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from ..auth.store import HtpasswdFile

ReloadCallback = Callable[[HtpasswdFile], Any]


@dataclass
class ReloadEvent:
    """一次重载检查的结果"""
    success: bool
    reloaded: bool
    duration_ms: float
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)


class AutoReloader:
    """自动重载管理器

    存储本身不创建线程或任务，由本类在事件循环中定时触发检查。
    单次失败只记录日志，下一个周期会再次尝试。
    """

    def __init__(
        self,
        store: HtpasswdFile,
        interval: Optional[float] = None,
        max_history_size: int = 100,
        slow_threshold_ms: float = 300,
    ):
        """初始化自动重载管理器

        Args:
            store: 要保持同步的凭据存储
            interval: 检查间隔（秒），默认使用 store.check_interval
            max_history_size: 保留的重载事件数量
            slow_threshold_ms: 超过该耗时将输出警告
        """
        self.store = store
        self._interval = interval
        self._max_history_size = max_history_size
        self._slow_threshold_ms = slow_threshold_ms

        # 状态管理
        self._running = False
        self._task: Optional[asyncio.Task] = None

        self._callbacks: List[ReloadCallback] = []
        self._reload_history: List[ReloadEvent] = []

    @property
    def interval(self) -> float:
        """实际使用的检查间隔"""
        if self._interval is not None:
            return self._interval
        return self.store.check_interval

    def on_reload(self, callback: ReloadCallback) -> None:
        """注册重载成功后的回调

        Args:
            callback: 同步或异步函数，参数为存储实例
        """
        self._callbacks.append(callback)
        logger.debug(f"已注册重载回调: {callback}")

    async def start(self) -> None:
        """启动定时检查"""
        if self._running:
            logger.warning("自动重载已在运行中")
            return

        if self.interval <= 0:
            logger.info("check_interval 未设置，不启用自动重载")
            return

        self._running = True
        self._task = asyncio.create_task(self._reload_loop())
        logger.info(f"自动重载已启动，间隔 {self.interval} 秒: {self.store.path}")

    async def stop(self) -> None:
        """停止定时检查"""
        if not self._running:
            return

        self._running = False

        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        logger.info("自动重载已停止")

    async def _reload_loop(self) -> None:
        """定时检查循环"""
        try:
            while self._running:
                await asyncio.sleep(self.interval)
                await self.reload_now()
        except asyncio.CancelledError:
            pass

    async def reload_now(self) -> ReloadEvent:
        """立即执行一次重载检查

        Returns:
            本次检查的重载事件
        """
        start_time = time.time()
        reloaded = False
        error_msg = None

        try:
            # reload 会阻塞在文件读取和解析上，放到线程中执行
            reloaded = await asyncio.to_thread(self.store.reload)
        except Exception as e:
            error_msg = str(e)
            logger.error(f"重载 {self.store.path} 失败，继续使用之前的用户: {e}")

        duration_ms = (time.time() - start_time) * 1000
        event = ReloadEvent(
            success=error_msg is None,
            reloaded=reloaded,
            duration_ms=duration_ms,
            error=error_msg,
        )
        self._add_reload_event(event)

        if duration_ms > self._slow_threshold_ms:
            logger.warning(
                f"重载 {self.store.path} 耗时 {duration_ms:.2f}ms，超过 {self._slow_threshold_ms}ms 阈值"
            )

        if reloaded:
            await self._notify()

        return event

    async def _notify(self) -> None:
        """通知所有回调"""
        for callback in self._callbacks:
            try:
                result = callback(self.store)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"重载回调出错: {e}")

    def _add_reload_event(self, event: ReloadEvent) -> None:
        """添加重载事件到历史记录"""
        self._reload_history.append(event)

        # 限制历史记录大小
        if len(self._reload_history) > self._max_history_size:
            self._reload_history.pop(0)

    def get_reload_history(self, limit: int = 50) -> List[Dict[str, Any]]:
        """获取重载历史

        Args:
            limit: 返回的最大记录数

        Returns:
            重载历史列表
        """
        events = self._reload_history[-limit:] if limit > 0 else self._reload_history

        return [
            {
                "success": event.success,
                "reloaded": event.reloaded,
                "duration_ms": event.duration_ms,
                "error": event.error,
                "timestamp": event.timestamp.isoformat(),
            }
            for event in events
        ]

    def get_stats(self) -> Dict[str, Any]:
        """获取重载统计信息"""
        total_checks = len(self._reload_history)
        failed = sum(1 for e in self._reload_history if not e.success)

        return {
            "path": self.store.path,
            "interval": self.interval,
            "total_checks": total_checks,
            "reloads": sum(1 for e in self._reload_history if e.reloaded),
            "failed_checks": failed,
            "is_running": self._running,
        }

    def is_running(self) -> bool:
        """检查是否正在运行"""
        return self._running


__all__ = [
    "ReloadCallback",
    "ReloadEvent",
    "AutoReloader",
]
