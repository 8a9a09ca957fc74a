from typing import Any

from ruamel.yaml import YAML


def get_yaml_instance() -> YAML:
    # config files are read only, plain dicts are enough for pydantic
    yaml = YAML(typ="safe", pure=True)
    return yaml


def load_yaml_file(path: str) -> Any:
    with open(path, "r") as f:
        return get_yaml_instance().load(f)
