import json
import logging
import os
from pathlib import Path
from typing import Optional

from PyQt6.QtGui import QColor

CONFIG_DIR_ENV = "COMMIT_HISTORY_CONFIG_DIR"


class Settings:
    def __init__(self, config_dir: Optional[str] = None):
        # 配置目录，默认在用户主目录下
        if config_dir is None:
            config_dir = os.getenv(CONFIG_DIR_ENV) or os.path.join(str(Path.home()), ".commit_history")
        self.config_dir = config_dir

        # 配置文件路径
        self.config_file = os.path.join(self.config_dir, "settings.json")

        # 默认设置
        self.settings = {
            "recent_repositories": [],  # 最近打开的仓库列表
            "last_repository": None,  # 上次打开的仓库
            "max_recent": 10,  # 最大记录数
            "include_remotes": False,  # 是否处理远程分支
            "include_tags": False,  # 是否处理标签
            "trace_history": False,  # 是否输出历史图构建的跟踪日志
        }

        # 加载已有设置
        self.load_settings()

    def load_settings(self):
        """加载设置"""
        try:
            if os.path.exists(self.config_file):
                with open(self.config_file, "r", encoding="utf-8") as f:
                    saved_settings = json.load(f)
                    self.settings.update(saved_settings)
        except (OSError, ValueError) as e:
            logging.warning("加载设置失败：%s", e)

    def save_settings(self):
        """保存设置"""
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.settings, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logging.warning("保存设置失败：%s", e)

    def add_recent_repository(self, repo_path):
        """添加最近打开的仓库"""
        # 更新最后打开的仓库
        self.settings["last_repository"] = repo_path

        recent = self.settings["recent_repositories"]

        # 如果已经在列表中，先移除
        if repo_path in recent:
            recent.remove(repo_path)

        # 添加到列表开头
        recent.insert(0, repo_path)

        # 保持列表在最大长度以内
        self.settings["recent_repositories"] = recent[: self.settings["max_recent"]]

        self.save_settings()

    def get_recent_repositories(self):
        """获取最近仓库列表"""
        return self.settings["recent_repositories"]

    def get_last_repository(self):
        """获取上次打开的仓库"""
        return self.settings["last_repository"]

    def get_include_remotes(self) -> bool:
        return bool(self.settings.get("include_remotes", False))

    def set_include_remotes(self, include_remotes: bool):
        self.settings["include_remotes"] = include_remotes
        self.save_settings()

    def get_include_tags(self) -> bool:
        return bool(self.settings.get("include_tags", False))

    def set_include_tags(self, include_tags: bool):
        self.settings["include_tags"] = include_tags
        self.save_settings()

    def get_trace_history(self) -> bool:
        """获取是否跟踪历史图构建"""
        return bool(self.settings.get("trace_history", False))

    def set_trace_history(self, trace_history: bool):
        self.settings["trace_history"] = trace_history
        self.save_settings()


# Lane colors, indexed by CommitConnection.color_index modulo the palette size
LANE_COLOR_PALETTE = [
    QColor("#1f77b4"),
    QColor("#ff7f0e"),
    QColor("#2ca02c"),
    QColor("#d62728"),
    QColor("#9467bd"),
    QColor("#8c564b"),
    QColor("#e377c2"),
    QColor("#7f7f7f"),
    QColor("#bcbd22"),
    QColor("#17becf"),
]


def lane_color(color_index: int) -> QColor:
    return LANE_COLOR_PALETTE[color_index % len(LANE_COLOR_PALETTE)]


# 创建全局settings实例
settings = Settings()
