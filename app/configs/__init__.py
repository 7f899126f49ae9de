from app.configs.settings import LimiterConfig, Settings, file_logger, settings

__all__ = [
    "LimiterConfig",
    "Settings",
    "file_logger",
    "settings",
]
