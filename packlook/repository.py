import logging
from pathlib import Path

from packlook.config import ConfigFile, ParseError
from packlook.pack import MAX_DELTA_DEPTH
from packlook.pack_locator import PackLocator
from packlook.setup_logging import LOG_LEVEL, setup_logging


class Repository:
    def __init__(self, git_path: Path):
        self.git_path: Path = git_path
        self.config: ConfigFile = ConfigFile(git_path / "config")

    @property
    def max_delta_depth(self) -> int:
        return self.config.get_int(["packlook", "maxDeltaDepth"], MAX_DELTA_DEPTH)

    @property
    def locator(self) -> PackLocator:
        return PackLocator(self.git_path, max_depth=self.max_delta_depth)

    @property
    def log_level(self) -> int | str:
        level = self.config.get(["packlook", "logLevel"])
        if level is None:
            return LOG_LEVEL
        if not isinstance(level, str) or level.upper() not in logging.getLevelNamesMapping():
            raise ParseError(f"bad log level {level!r} for packlook.logLevel")
        return level

    def setup_logging(self) -> None:
        log_file = self.config.get(["packlook", "logFile"])
        setup_logging(
            level=self.log_level,
            log_file=log_file if isinstance(log_file, str) else None,
        )
