import json
import logging

import hibprequester
from policy import DEFAULT_REQUIREMENTS, PasswordRequirements


class HibpConfig:
    def __init__(self, enabled: bool = False, timeout: float = hibprequester.TIMEOUT):
        # If generated passwords are checked on HIBP when the caller does not say
        self.enabled = enabled
        self.timeout = timeout


class Configuration:
    def __init__(self, dev: bool, requirements: PasswordRequirements, hibp: HibpConfig, log_level: str = "WARNING"):
        self.dev = dev
        self.requirements = requirements
        self.hibp = hibp
        self.log_level = log_level


def create_default_configuration() -> Configuration:
    return Configuration(False, DEFAULT_REQUIREMENTS, HibpConfig())


def hibp_load_from_json(jsonobj) -> HibpConfig:
    return HibpConfig(bool(jsonobj["enabled"]), float(jsonobj["timeout"]))


def config_load_from_file(file) -> Configuration:
    r"""
    Loads the service settings. The password requirements always are the built-in defaults.
    :param file: path of the json file
    :return: loaded configuration
    :raises KeyError: if a setting is missing
    """
    with open(file) as f:
        jsonobj = json.load(f)
        return Configuration(bool(jsonobj["dev"]), DEFAULT_REQUIREMENTS, hibp_load_from_json(jsonobj["hibp"]),
                             jsonobj["log_level"])


def configure_logging(level: str = "WARNING"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
