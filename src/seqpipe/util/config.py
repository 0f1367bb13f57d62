from typing import Any, Dict, Optional
import logging
import os
import tomllib
from logging.handlers import TimedRotatingFileHandler

from seqpipe.util.constants import LOGGER_FILES, LOGGER_LEVELS

logger = logging.getLogger(__name__)

_config = None

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


def parse_key_value_str(field_list: str, require_value: bool = False) -> Dict[str, str]:
    """Parse a property assignment list into a dictionary.

    Args:
        field_list (str): A comma-separated string of key-value pairs in the format "key:value,key:value".
        require_value (bool, optional): If True, raises a ValueError when a key is missing a value.

    Returns:
        Dict[str, str]: A dictionary where keys are property names and values are assigned values.
            A key without a value maps to itself.

    Raises:
        ValueError: If require_value is True and a key is missing a value.
    """
    result = {}
    for prop in field_list.split(","):
        key, *value = prop.split(":", 1)
        key = key.strip()
        value = value[0].strip() if len(value) > 0 else None

        if value is None:
            if require_value:
                raise ValueError(f"Value required for property '{key}'")
            value = key

        result[key] = value

    return result


def reset_config():
    """Reset the cached configuration.

    The next call to get_config() reloads from disk and the environment.
    """
    global _config
    _config = None


def get_config(reload=False, path="~/.seqpipe.toml", ignore_env=False):
    """Get the configuration from the config file and environment variables.

    Args:
        reload (bool, optional): Force reload config from disk. Defaults to False.
        path (str, optional): Path to config file. Defaults to "~/.seqpipe.toml".
        ignore_env (bool, optional): Skip the SEQPIPE_* environment overlay.

    Returns:
        dict: Configuration dictionary combining file and environment settings.

    Notes:
        - Config file values are read from the TOML file if it exists
        - Environment variables prefixed with 'SEQPIPE_' take precedence
        - Configuration is cached after first load unless reload=True
    """
    global _config
    if _config is None or reload:
        logger.debug("Loading configuration")
        config_path = os.path.expanduser(path)
        if os.path.exists(config_path):
            logger.info(f"Reading config from {config_path}")
            with open(config_path, 'rb') as f:
                _config = tomllib.load(f)
                logger.debug(f"Loaded config: {_config}")
        else:
            logger.debug(f"Config file {config_path} not found, using empty config")
            _config = {}

        if not ignore_env:
            for env_var in os.environ:
                if env_var.startswith('SEQPIPE_'):
                    config_key = env_var[len('SEQPIPE_'):].lower()
                    _config[config_key] = os.environ[env_var]
                    logger.debug(f"Set {config_key} from environment variable {env_var}")

    return _config


def get_flag(key: str, default: bool = False) -> bool:
    """Read a boolean setting.

    TOML booleans are used as-is; strings (typically from the environment)
    accept 1/true/yes/on and 0/false/no/off in any case.

    Raises:
        ValueError: If the stored value cannot be read as a boolean.
    """
    value: Any = get_config().get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"Config value for '{key}' is not a boolean: {value!r}")


def configure_logger(logger_levels: Optional[str] = None, base_level="WARNING", logger_files: Optional[str] = None):
    """Configure logging levels and handlers for specified loggers.

    Args:
        logger_levels (str): Logger name and level pairs, "logger1:LEVEL1,logger2:LEVEL2".
            Use "root" as logger name for the root logger.
        base_level (str, optional): Default logging level. Defaults to "WARNING".
        logger_files (str, optional): Loggers mapped to file paths in "logger:path" format.
            Files rotate at midnight and keep a week of backups.

    Examples:
        >>> configure_logger("root:INFO,seqpipe.seq:DEBUG")
        >>> configure_logger("seqpipe:DEBUG", logger_files="seqpipe:/tmp/seqpipe.log")

    Note:
        When arguments are omitted, the logger_levels and logger_files config keys are used.
    """
    if not logger_levels:
        logger_levels = get_config().get(LOGGER_LEVELS, None)

    if not logger_files:
        logger_files = get_config().get(LOGGER_FILES, None)

    logging.basicConfig(level=base_level.upper())

    formatter = logging.Formatter('%(asctime)s - %(levelname)s:%(name)s:%(message)s')

    if logger_levels:
        for logger_name, level in parse_key_value_str(logger_levels).items():
            level = level.upper()
            target = logging.getLogger(logger_name if logger_name != "root" else None)
            target.setLevel(level)

            # Remove existing handlers to prevent duplicate logs
            target.handlers.clear()

            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            target.addHandler(console_handler)

    if logger_files:
        for logger_name, file_name in parse_key_value_str(logger_files, require_value=True).items():
            target = logging.getLogger(logger_name if logger_name != "root" else None)

            file_handler = TimedRotatingFileHandler(file_name, when='midnight', backupCount=7)
            file_handler.setLevel(target.level or logging.getLevelName(base_level.upper()))
            file_handler.setFormatter(formatter)
            target.addHandler(file_handler)
