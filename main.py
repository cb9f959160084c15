import logging
import os
import sys

from commit_history import HistoryGraphBuilder
from git_manager import GitManager
from settings import settings
from utils import short_sha


def format_row(entry) -> str:
    lanes = " ".join(str(c.color_index) for c in entry.connections)
    return f"{short_sha(entry.sha, 8)}  [{lanes}]  {entry.commit.message}"


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    include_remotes = "--remotes" in args or settings.get_include_remotes()
    include_tags = "--tags" in args or settings.get_include_tags()
    paths = [a for a in args if not a.startswith("--")]
    repo_path = paths[0] if paths else (settings.get_last_repository() or ".")

    git_manager = GitManager(repo_path)
    if not git_manager.initialize():
        logging.error("%s 不是 Git 仓库", repo_path)
        return 1
    settings.add_recent_repository(os.path.abspath(repo_path))

    diagnostics = logging.debug if settings.get_trace_history() else None
    builder = HistoryGraphBuilder(git_manager, diagnostics=diagnostics)
    builder.process_heads(git_manager.get_head_commits(include_remotes, include_tags))
    builder.connect_commits()

    for entry in builder.entries:
        print(format_row(entry))
    return 0


if __name__ == "__main__":
    # 根据环境变量设置日志级别
    log_level = logging.DEBUG if os.getenv("DEBUG") == "1" else logging.INFO

    # 配置日志
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"
    )
    # add file handler
    if os.getenv("LOG_TO_FILE") == "1":
        file_handler = logging.FileHandler("commit_history.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s")
        )
        logging.getLogger().addHandler(file_handler)
    sys.exit(main())
