"""
Archive settings, uses pydantic settings models.
"""

import zipfile
from pathlib import Path
from typing import Literal

from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class ArchiveSettings(BaseSettings):
    """
    Settings for reading and writing archives. Used to configure:

    1. Naming of the files generated on save (manifest and descriptions).
    2. Where staging directories live, and whether they are cleaned up.
    3. Compression and verbosity.
    """

    default_archive_name: str = "untitled.omex"
    "Archive file name used until the archive is saved somewhere"
    manifest_name: str = "manifest.xml"
    "Name of the manifest inside the archive"
    metadata_name_template: str = "manifest{}.xml"
    "Name of each description document, formatted with the description index"

    staging_root: Path | None = None
    "Parent directory for staging directories; the system temporary directory if unset"
    cleanup_staging: bool = True
    "Remove staging directories owned by an archive when it is closed"

    compression: Literal["deflated", "stored"] = "deflated"
    "Compression used for archive members"
    verbose: bool = False
    "Verbosity control: set to true for extra info"

    model_config = SettingsConfigDict(
        json_file=("omex.json", "~/.omex.conf"), env_prefix="omex_"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            dotenv_settings,
            env_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def zip_compression(self) -> int:
        """
        The zipfile compression constant for the configured compression.
        """
        return zipfile.ZIP_DEFLATED if self.compression == "deflated" else zipfile.ZIP_STORED
