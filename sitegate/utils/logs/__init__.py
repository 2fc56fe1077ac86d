from sitegate.utils.logs.logs import PROCESS_LEVEL, ColorFormatter, logger, set_level, setup_logger

__all__ = ["PROCESS_LEVEL", "ColorFormatter", "logger", "set_level", "setup_logger"]
