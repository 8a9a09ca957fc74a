from .release_config_repository import ReleaseConfigRepository

__all__ = [
    'ReleaseConfigRepository',
]
