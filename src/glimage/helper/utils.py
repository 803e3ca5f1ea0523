import configparser
import os

CONFIG_FILE = "glimage.ini"
CONFIG_ENV = "GLIMAGE_CONFIG"

DEFAULTS = {
    "indent": "4",
    "log_level": "WARNING",
    "format": "json",
}


def config_path() -> str:
    return os.getenv(CONFIG_ENV, CONFIG_FILE)


def get_config(path=None) -> configparser.ConfigParser:
    config = configparser.ConfigParser(defaults=DEFAULTS)
    path = path or config_path()
    if os.path.exists(path):
        config.read(path)
    return config


def save_config(config: configparser.ConfigParser, path=None):
    with open(path or config_path(), "w") as configfile:
        config.write(configfile)
