import logging
from typing import TYPE_CHECKING, Optional

from PyQt6.QtCore import QThread, pyqtSignal

from commit_history import HistoryGraphBuilder
from utils import timeit

if TYPE_CHECKING:
    from git_manager import GitManager


class HistoryLoadThread(QThread):
    """用于在后台构建提交历史图的线程"""

    finished = pyqtSignal(list)  # 构建完成的 CommitEntry 列表
    error = pyqtSignal(str)  # 错误信号
    cancelled = pyqtSignal()  # 被中断

    def __init__(
        self,
        git_manager: "GitManager",
        builder: Optional[HistoryGraphBuilder] = None,
        include_remotes: bool = False,
        include_tags: bool = False,
        parent=None,
    ):
        super().__init__(parent)
        self.git_manager = git_manager
        self.builder = builder if builder is not None else HistoryGraphBuilder(git_manager)
        self.include_remotes = include_remotes
        self.include_tags = include_tags

    @timeit
    def run(self):
        """重新构建历史并分配连线颜色"""
        try:
            heads = self.git_manager.get_head_commits(self.include_remotes, self.include_tags)
            self.builder.reset()
            if not self.builder.process_heads(heads, should_cancel=self.isInterruptionRequested):
                logging.info("历史构建被中断，已处理 %d 个提交", len(self.builder))
                self.cancelled.emit()
                return
            unterminated = self.builder.connect_commits()
            logging.info(
                "历史构建完成：%d 个分支头，%d 个提交，%d 条未结束的连线",
                len(heads),
                len(self.builder),
                len(unterminated),
            )
            self.finished.emit(self.builder.snapshot())
        except Exception as e:
            logging.exception("构建提交历史失败")
            self.error.emit(str(e))
