from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class RegistryTag:
    name: str
    manifest_digest: str


@dataclass(frozen=True)
class ManifestLabel:
    key: str
    value: str
