import logging
import os


class Config:
    HOST = os.environ.get('SCOREBOARD_HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8046'))
    # Where win stats and the player roster are stored. Empty disables persistence.
    DATA_DIR = os.environ.get('SCOREBOARD_DATA_DIR', 'data') or None
    # Undo depth (snapshots kept per game)
    MAX_HISTORY_LENGTH = int(os.environ.get('SCOREBOARD_MAX_HISTORY', '20'))
    LOG_LEVEL = os.environ.get('SCOREBOARD_LOG_LEVEL', 'INFO')


LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'


def configure_logging(level: str = Config.LOG_LEVEL) -> None:
    root = logging.getLogger()
    if not any(getattr(h, '_scoreboard', False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        handler._scoreboard = True
        root.addHandler(handler)
    root.setLevel(level.upper())
