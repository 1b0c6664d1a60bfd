from __future__ import annotations

import json
import pathlib
import typing as t

import yaml

if t.TYPE_CHECKING:
    from typing import Literal, TypeAlias

    FormatLiteral = Literal["json", "yaml"]

    RawConfigData: TypeAlias = dict[t.Any, t.Any]


class ConfigReader:
    """Parse settings data (YAML and JSON) into a dictionary.

    >>> ConfigReader({"fsync": False}).content
    {'fsync': False}
    """

    def __init__(self, content: RawConfigData) -> None:
        self.content = content

    @staticmethod
    def _load(fmt: FormatLiteral, content: str) -> dict[str, t.Any]:
        """Load raw settings data and directly return it.

        Empty documents load as an empty mapping.

        >>> ConfigReader._load("json", '{ "backup": false }')
        {'backup': False}

        >>> ConfigReader._load("yaml", 'backup: false')
        {'backup': False}

        >>> ConfigReader._load("yaml", '')
        {}
        """
        if fmt == "yaml":
            loaded = yaml.load(content, Loader=yaml.SafeLoader)
        elif fmt == "json":
            loaded = json.loads(content) if content.strip() else None
        else:
            msg = f"{fmt} not supported in configuration"
            raise NotImplementedError(msg)
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            msg = f"Expected a mapping at the top level, got {type(loaded).__name__}"
            raise TypeError(msg)
        return t.cast("dict[str, t.Any]", loaded)

    @classmethod
    def _from_file(cls, path: pathlib.Path) -> dict[str, t.Any]:
        r"""Load data from file path directly to dictionary.

        >>> yaml_file = tmp_path / 'settings.yaml'
        >>> yaml_file.write_text('profiles_dir: ~/profiles', encoding='utf-8')
        24
        >>> ConfigReader._from_file(yaml_file)
        {'profiles_dir': '~/profiles'}
        """
        assert isinstance(path, pathlib.Path)
        content = path.read_text(encoding="utf-8")

        if path.suffix in {".yaml", ".yml"}:
            fmt: FormatLiteral = "yaml"
        elif path.suffix == ".json":
            fmt = "json"
        else:
            msg = f"{path.suffix} not supported in {path}"
            raise NotImplementedError(msg)

        return cls._load(fmt=fmt, content=content)

    @classmethod
    def from_file(cls, path: pathlib.Path) -> ConfigReader:
        r"""Load data from file path.

        >>> json_file = tmp_path / 'settings.json'
        >>> json_file.write_text('{"backup": false}', encoding='utf-8')
        17
        >>> ConfigReader.from_file(json_file).content
        {'backup': False}
        """
        return cls(content=cls._from_file(path=path))

