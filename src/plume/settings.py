import dataclasses
import datetime
import logging
import pathlib
import typing

import cattrs
import cattrs.gen
import tomli

from .durations import as_timedelta

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = pathlib.Path("~/.config/plume/settings.toml")

FILE_TYPES = {
    "Plain Text": ["txt"],
    "Markdown": ["md", "markdown"],
    "Python": ["py", "pyi"],
    "Rust": ["rs"],
    "TOML": ["toml"],
    "JSON": ["json"],
    "Shell": ["sh", "bash"],
    "C": ["c", "h"],
    "JavaScript": ["js", "mjs"],
    "HTML": ["html", "htm"],
}

DEFAULTS = {
    "config_path": "~/.config/plume/config.py",
    "plugin_paths": ["~/.config/plume/plugins"],
    "poll_quantum": "50ms",
    "tab_width": 4,
    "line_numbers": True,
    "file_types": FILE_TYPES,
}


settings_converter = cattrs.Converter()
settings_converter.register_structure_hook(datetime.timedelta, lambda d, _: as_timedelta(d))
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v).expanduser())


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: typing.Optional[pathlib.Path]
    config_path: pathlib.Path
    plugin_paths: list[pathlib.Path]
    poll_quantum: datetime.timedelta
    tab_width: int
    line_numbers: bool
    file_types: dict[str, list[str]]

    def file_type_for(self, extension: str) -> str:
        for name, extensions in self.file_types.items():
            if extension in extensions:
                return name
        return "Unknown"

    @classmethod
    def load(cls, src: pathlib.Path):
        src = src.expanduser()
        raw = dict(DEFAULTS)
        if src.exists():
            with src.open("rb") as infile:
                raw.update(tomli.load(infile))
        else:
            logger.debug("No settings file at %s; using defaults", src)
        raw["_path"] = src
        return settings_converter.structure(raw, cls)

    @classmethod
    def for_test(cls, **overrides):
        raw = dict(DEFAULTS, _path=None, config_path="test_config.py", plugin_paths=[])
        raw.update(overrides)
        return settings_converter.structure(raw, cls)


settings_converter.register_structure_hook(Settings, cattrs.gen.make_dict_structure_fn(Settings, settings_converter))
