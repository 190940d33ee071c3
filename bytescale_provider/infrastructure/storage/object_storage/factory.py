"""
File Provider Factory

Creates file providers by identifier, using settings when no options are given.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Type, Union

from ....core.config import settings
from .base import FileProviderInterface, ProviderConfig
from .bytescale_adapter import BytescaleFileProviderService

logger = logging.getLogger(__name__)


class StorageFactory:
    """Factory for creating file provider instances"""

    _adapters: Dict[str, Type[FileProviderInterface]] = {
        BytescaleFileProviderService.identifier: BytescaleFileProviderService,
    }

    @classmethod
    def create(
        cls,
        identifier: Optional[str] = None,
        options: Optional[Union[ProviderConfig, Mapping[str, Any]]] = None,
        logger: Optional[logging.Logger] = None,
        **kwargs: Any,
    ) -> FileProviderInterface:
        """
        Create a file provider

        Args:
            identifier: Provider identifier (default: settings.DEFAULT_PROVIDER)
            options: Provider options; read from settings when omitted
            logger: Logger handed to the provider
            **kwargs: Extra constructor arguments (e.g. ``client``)

        Returns:
            FileProviderInterface implementation

        Raises:
            ValueError: Unknown identifier
            InvalidConfiguration: Required options are missing
        """
        identifier = identifier or settings.DEFAULT_PROVIDER
        if identifier not in cls._adapters:
            raise ValueError(f"Unsupported file provider: {identifier}")

        if options is None:
            options = cls._get_default_options(identifier)
            if identifier == BytescaleFileProviderService.identifier:
                kwargs.setdefault("api_base", settings.BYTESCALE_API_BASE)
                kwargs.setdefault("cdn_base", settings.BYTESCALE_CDN_BASE)
                kwargs.setdefault("timeout", settings.BYTESCALE_TIMEOUT)
                kwargs.setdefault("chunk_size", settings.DOWNLOAD_CHUNK_SIZE)
                kwargs.setdefault("max_buffered_chunks", settings.STREAM_MAX_BUFFERED_CHUNKS)

        return cls._adapters[identifier](options, logger=logger, **kwargs)

    @staticmethod
    def _get_default_options(identifier: str) -> Dict[str, Any]:
        """Get default options from settings"""
        if identifier == BytescaleFileProviderService.identifier:
            return settings.PROVIDER_OPTIONS
        raise ValueError(f"No default configuration for file provider: {identifier}")

    @classmethod
    def register_adapter(cls, name: str, adapter_class: Type[FileProviderInterface]) -> None:
        """
        Register a new provider type

        Args:
            name: Provider identifier
            adapter_class: Provider class (must implement FileProviderInterface)
        """
        if not (isinstance(adapter_class, type) and issubclass(adapter_class, FileProviderInterface)):
            raise ValueError("Provider class must implement FileProviderInterface")

        cls._adapters[name] = adapter_class
        logger.info(f"Registered file provider: {name}")

    @classmethod
    def available(cls) -> list:
        return sorted(cls._adapters)
