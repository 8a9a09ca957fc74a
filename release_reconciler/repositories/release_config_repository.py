import os
from typing import Any

from release_reconciler.models import ReleaseConfig
from release_reconciler.utils.yaml_loader import load_yaml_file


class ReleaseConfigRepository:
    def __init__(self, file_path: str):
        self.file_path: str = file_path

    def load(self) -> ReleaseConfig:
        if not os.path.isfile(self.file_path):
            return ReleaseConfig()
        data: Any = load_yaml_file(self.file_path) or {}
        try:
            return ReleaseConfig(**data)
        except Exception as e:
            raise ValueError(f"Invalid release config structure: {e}") from e
