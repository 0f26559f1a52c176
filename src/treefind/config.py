from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, TypedDict, cast

import yaml


class RawAppConfig(TypedDict):
    quiet: bool
    null_separator: bool


class RawConfigFile(TypedDict):
    config: RawAppConfig


CONFIG_FILENAME: Path = Path("treefind.yaml")


def type_error(value: object) -> NoReturn:
    raise TypeError(f"Unexpected value of wrong type: {value!r}")


@dataclass(slots=True)
class AppConfig:
    quiet: bool = False
    null_separator: bool = False

    @staticmethod
    def load(path: Path = CONFIG_FILENAME) -> "AppConfig":
        if not path.exists():
            raise FileNotFoundError(f"Missing config file: {path}")

        with path.open("r", encoding="UTF-8") as f:
            raw_loaded_obj: object | None = cast(object, yaml.safe_load(f))

        if not raw_loaded_obj:
            raise ValueError("Config file is empty or invalid YAML.")

        if not isinstance(raw_loaded_obj, dict):
            type_error(raw_loaded_obj)

        raw_dict: dict[str, object] = cast(dict[str, object], raw_loaded_obj)

        cfg_raw: object | None = raw_dict.get("config")
        if not isinstance(cfg_raw, dict):
            type_error(cfg_raw)

        cfg: dict[str, object] = cast(dict[str, object], cfg_raw)

        quiet: object = cfg.get("quiet", False)
        null_separator: object = cfg.get("null_separator", False)
        if not isinstance(quiet, bool):
            type_error(quiet)
        if not isinstance(null_separator, bool):
            type_error(null_separator)

        return AppConfig(quiet=quiet, null_separator=null_separator)

    @staticmethod
    def load_default() -> "AppConfig":
        """Load `treefind.yaml` from the working directory if there is one."""
        if CONFIG_FILENAME.exists():
            return AppConfig.load(CONFIG_FILENAME)
        return AppConfig()

    def save(self, path: Path = CONFIG_FILENAME) -> None:
        raw: RawConfigFile = {"config": self.to_raw()}
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(raw, f, sort_keys=False)

    def to_raw(self) -> RawAppConfig:
        return {
            "quiet": self.quiet,
            "null_separator": self.null_separator,
        }
