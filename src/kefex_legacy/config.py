"""
Import Configuration
====================

Settings shared by the file loaders and the RAMView importer.
Configuration can come from:
- Default values (defined here)
- Environment variables (see ImportConfig.from_env)

The defaults reproduce the behavior of the legacy RAMView tool chain:
Windows-1252 encoded text files and 31 character names in the Datapool.
"""

from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)


@dataclass
class ImportConfig:
    """
    Configuration for loading and importing legacy projects.

    Attributes:
        text_encoding: Encoding of .def/.ram/.rec files and .dat strings
        max_name_length: Maximum length of Datapool, list, element and
            data set names after sanitization
        max_dat_size: Upper limit for the declared uncompressed .dat payload
        dataset_name_prefix: Prefix for data sets without an explicit name
    """

    text_encoding: str = "cp1252"
    max_name_length: int = 31
    max_dat_size: int = 64 * 1024 * 1024
    dataset_name_prefix: str = "Dataset_"

    @classmethod
    def from_env(cls) -> "ImportConfig":
        """
        Create an ImportConfig from environment variables.

        Environment variables (all optional):
            KEFEX_TEXT_ENCODING: Text encoding of project files
            KEFEX_MAX_NAME_LENGTH: Maximum sanitized name length (integer)
            KEFEX_MAX_DAT_SIZE: Maximum uncompressed .dat size (integer)
            KEFEX_DATASET_NAME_PREFIX: Prefix for unnamed data sets

        Returns:
            ImportConfig with values from environment variables
        """
        config = cls()

        if encoding := os.environ.get("KEFEX_TEXT_ENCODING"):
            config.text_encoding = encoding

        if max_name := os.environ.get("KEFEX_MAX_NAME_LENGTH"):
            try:
                config.max_name_length = int(max_name)
            except ValueError:
                logger.warning(f"Ignoring invalid KEFEX_MAX_NAME_LENGTH: {max_name!r}")

        if max_dat := os.environ.get("KEFEX_MAX_DAT_SIZE"):
            try:
                config.max_dat_size = int(max_dat)
            except ValueError:
                logger.warning(f"Ignoring invalid KEFEX_MAX_DAT_SIZE: {max_dat!r}")

        if prefix := os.environ.get("KEFEX_DATASET_NAME_PREFIX"):
            config.dataset_name_prefix = prefix

        return config


# Module-level default used when callers do not pass a configuration
DEFAULT_CONFIG = ImportConfig()
