# What it does: Manages all read/write operations for the `.pit/config` file, including the `[log]` settings used by the history view
# What data structure it uses: Map / Hash Table / Dictionary (the INI file format is a map of sections to key-value pairs, managed by Python's `configparser`)

import configparser
import os
from .pathfilter import DEFAULT_RENAME_THRESHOLD
from .repository import find_repo_root

DEFAULT_LOG_LIMIT = 100

def get_config_path(repo_root):  # Returns the path to the config file within the repository
    return os.path.join(repo_root, '.pit', 'config')

def read_config(repo_root=None): # Reads and returns the configuration as a ConfigParser object
    repo_root = repo_root or find_repo_root()
    config = configparser.ConfigParser()
    if not repo_root:
        return config

    config_path = get_config_path(repo_root)
    if os.path.exists(config_path):
        config.read(config_path)
    return config

def write_config(key, value, repo_root=None): # Sets a configuration key to a value and writes it to the config file
    repo_root = repo_root or find_repo_root()
    if not repo_root:
        raise FileNotFoundError("Not a Pit repository.")

    config_path = get_config_path(repo_root)
    config = configparser.ConfigParser()
    if os.path.exists(config_path):
        config.read(config_path)

    try:
        section, option = key.split('.', 1)
    except ValueError:
        raise ValueError("Error: Invalid key format. Should be 'section.key'.")

    if not config.has_section(section):
        config.add_section(section)

    config.set(section, option, value)

    with open(config_path, 'w') as configfile:
        config.write(configfile)

def _get_non_negative_int(config, section, option, default):
    try:
        value = config.getint(section, option, fallback=default)
    except ValueError:
        raise ValueError(f"Error: {section}.{option} must be an integer.")
    if value < 0:
        raise ValueError(f"Error: {section}.{option} must not be negative.")
    return value

def get_log_config(repo_root): # Retrieves log.limit and log.renameThreshold, falling back to the defaults
    config = read_config(repo_root)

    limit = _get_non_negative_int(config, 'log', 'limit', DEFAULT_LOG_LIMIT)
    rename_threshold = _get_non_negative_int(config, 'log', 'renamethreshold', DEFAULT_RENAME_THRESHOLD)
    if rename_threshold > 100:
        raise ValueError("Error: log.renameThreshold must be between 0 and 100.")

    return {'limit': limit, 'rename_threshold': rename_threshold}
