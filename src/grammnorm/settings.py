"""Generic 'settings' class for the transformation pipeline.
Values not present in a settings file fall back to the
constants in grammnorm.config.
"""
import io
import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)

import yaml
try:
    from yaml import CSafeLoader as Loader, CSafeDumper as Dumper
except ImportError:
    logging.info("Using pure Python version of yaml loader")
    from yaml import SafeLoader as Loader, SafeDumper as Dumper

import grammnorm.config as config
from grammnorm.errors import SettingsError

DEFAULTS = {
    "max_iterations": config.MAX_ITERATIONS,
    "max_growth": config.MAX_GROWTH,
}


class Settings:
    """Basically a key-value store, with a few bells and whistles."""
    def __init__(self, **values):
        self.values = dict(DEFAULTS)
        self.values.update(values)

    def __getitem__(self, item: str) -> object:
        return self.values.get(item)

    def __setitem__(self, key: str, value: object):
        self.values[key] = value

    def read_yaml(self, f: io.IOBase):
        try:
            data = yaml.load(f, Loader=Loader)
        except yaml.YAMLError as e:
            raise SettingsError(f"Settings file is not valid YAML: {e}")
        if data is None:
            return
        if not isinstance(data, dict):
            raise SettingsError("Settings file does not represent a table")
        for key, value in data.items():
            if key not in DEFAULTS:
                log.warning(f"Unknown setting '{key}' ignored")
                continue
            self.values[key] = value
        for key in DEFAULTS:
            value = self.values[key]
            # bool is an int, but not a count
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise SettingsError(f"{key} must be a positive integer, not {value!r}")

    def dump_yaml(self) -> str:
        return yaml.dump(self.values, Dumper=Dumper, allow_unicode=True)

    @property
    def max_iterations(self) -> int:
        return self.values["max_iterations"]

    @property
    def max_growth(self) -> int:
        return self.values["max_growth"]


def load(f: io.IOBase) -> Settings:
    """Settings from a YAML file, over the defaults"""
    settings = Settings()
    settings.read_yaml(f)
    return settings
