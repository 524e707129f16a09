"""Saves and loads scraping configurations as JSON files."""

import logging
import os

from customsource.exceptions import ConfigValidationError, CustomSourceError
from customsource.models import ScrapingConfig
from customsource.utils.files import init_customsource
from customsource.validator import validate_config

logger = logging.getLogger(__name__)


class SourceStorage:
    """Manages custom source configurations on disk.

    Each configuration lives in its own ``<id>.json`` file, where the id is
    the explicit one or the one derived from name and base URL. Files hold
    exactly what ``ScrapingConfig.to_json`` produces, so a stored file can
    be shared and imported elsewhere as is.

    Attributes:
        storage_dir: Directory path where configuration files are stored

    """

    def __init__(self, storage_dir: str = 'sources'):
        """Initialize the storage manager.

        Args:
            storage_dir: Directory name under .customsource. Defaults to 'sources'.

        """
        self.storage_dir = str(init_customsource(storage_dir))

    def create(self, config: ScrapingConfig) -> ScrapingConfig:
        """Validate and save a new configuration.

        Raises:
            ConfigValidationError: If the configuration is incomplete
            CustomSourceError: If a source with the same id already exists

        """
        validate_config(config)
        if self.exists(config.source_id):
            raise CustomSourceError(f'Source {config.source_id} ({config.name}) already exists')
        self._write(config)
        logger.info(f'Created source {config.name} ({config.source_id})')
        return config

    def update(self, source_id: int, config: ScrapingConfig) -> ScrapingConfig:
        """Validate a configuration and replace the one stored under ``source_id`` wholesale.

        Renaming a source or moving its base URL changes a derived id; the
        edited configuration is then stored under its new id and the old file
        is removed.

        Args:
            source_id: Id the source is currently stored under
            config: Edited configuration

        Raises:
            ConfigValidationError: If the configuration is incomplete
            CustomSourceError: If nothing is stored under ``source_id``, or the
                new id belongs to another stored source

        """
        validate_config(config)
        if not self.exists(source_id):
            raise CustomSourceError(f'Source {source_id} does not exist')

        new_id = config.source_id
        if new_id != source_id and self.exists(new_id):
            raise CustomSourceError(f'Source {new_id} ({config.name}) already exists')

        self._write(config)
        if new_id != source_id:
            os.remove(self._get_filepath(source_id))
            logger.info(f'Updated source {config.name} ({source_id} -> {new_id})')
        else:
            logger.info(f'Updated source {config.name} ({new_id})')
        return config

    def delete(self, source_id: int) -> bool:
        """Delete a stored configuration.

        Returns:
            True if a file was removed, False if none was stored.

        """
        filepath = self._get_filepath(source_id)
        if not os.path.exists(filepath):
            return False
        os.remove(filepath)
        logger.info(f'Deleted source {source_id}')
        return True

    def exists(self, source_id: int) -> bool:
        """Check if a configuration is stored under ``source_id``."""
        return os.path.exists(self._get_filepath(source_id))

    def get(self, source_id: int) -> ScrapingConfig | None:
        """Load a stored configuration.

        Returns:
            The configuration, or None if not found or unreadable.

        """
        filepath = self._get_filepath(source_id)
        if not os.path.exists(filepath):
            return None
        return self._load(filepath)

    def list_sources(self) -> list[ScrapingConfig]:
        """Load every stored configuration, sorted by name."""
        if not os.path.exists(self.storage_dir):
            return []

        configs = []
        for filename in sorted(os.listdir(self.storage_dir)):
            if not filename.endswith('.json'):
                continue
            config = self._load(os.path.join(self.storage_dir, filename))
            if config is not None:
                configs.append(config)
        return sorted(configs, key=lambda c: c.name.lower())

    def export_source(self, source_id: int) -> str | None:
        """Export a stored configuration as JSON, or None if not found."""
        config = self.get(source_id)
        return config.to_json() if config else None

    def import_source(self, data: str | bytes) -> ScrapingConfig:
        """Import a configuration from JSON, replacing any stored one with the same id.

        Raises:
            ConfigValidationError: If the JSON is malformed or incomplete

        """
        config = ScrapingConfig.from_json(data)
        self._write(config)
        logger.info(f'Imported source {config.name} ({config.source_id})')
        return config

    def _write(self, config: ScrapingConfig) -> None:
        with open(self._get_filepath(config.source_id), 'w', encoding='utf-8') as f:
            f.write(config.to_json())

    def _load(self, filepath: str) -> ScrapingConfig | None:
        try:
            with open(filepath, encoding='utf-8') as f:
                return ScrapingConfig.from_json(f.read())
        except (OSError, ConfigValidationError) as e:
            logger.warning(f'Skipping unreadable source file {filepath}: {e}')
            return None

    def _get_filepath(self, source_id: int) -> str:
        return os.path.join(self.storage_dir, f'{source_id}.json')
