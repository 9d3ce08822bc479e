from __future__ import annotations

import logging
import os
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/assets"
ASSET_SUBDIR = "pokemons"
DEFAULT_PLACEHOLDER = "default.png"


@dataclass(frozen=True)
class StagedUpload:
    """An uploaded image sitting under its temporary name."""

    path: Path
    original_name: str

    @property
    def extension(self) -> str:
        return Path(self.original_name).suffix


class AssetStore:
    """
    Per-creature image files, one per identity, named ``<id><ext>``.

    The directory is what ``/assets/pokemons`` serves; URLs handed out are
    absolute and use ``public_base_url`` as host.
    """

    def __init__(
        self,
        root: Path,
        public_base_url: str,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ):
        self.root = Path(root)
        self.directory = self.root / ASSET_SUBDIR
        self.public_base_url = public_base_url.rstrip("/")
        self.placeholder = placeholder

    @property
    def url_marker(self) -> str:
        return f"{PUBLIC_PREFIX}/{ASSET_SUBDIR}/"

    @property
    def placeholder_url(self) -> str:
        return self.public_url(self.placeholder)

    def ensure(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def public_url(self, filename: str) -> str:
        return f"{self.public_base_url}{self.url_marker}{filename}"

    def path_for(self, filename: str) -> Path:
        return self.directory / filename

    # ---- uploads ----

    def stage(self, stream: BinaryIO, original_name: str) -> StagedUpload:
        self.ensure()
        ext = Path(original_name or "").suffix
        target = self.path_for(f"temp_{time.time_ns()}{ext}")
        try:
            with open(target, "wb") as out:
                shutil.copyfileobj(stream, out)
        except BaseException:
            target.unlink(missing_ok=True)
            raise
        return StagedUpload(path=target, original_name=original_name or "")

    def bind(self, upload: StagedUpload, identity: int) -> str:
        filename = f"{identity}{upload.extension}"
        # os.replace перезаписывает существующий файл этого id
        os.replace(upload.path, self.path_for(filename))
        logger.debug("bound %s to %s", upload.path.name, filename)
        return self.public_url(filename)

    def discard(self, upload: Optional[StagedUpload]) -> None:
        if upload is None:
            return
        try:
            upload.path.unlink(missing_ok=True)
        except OSError:
            logger.exception("could not delete staged upload %s", upload.path)

    # ---- stored images ----

    def local_filename(self, url: Optional[str]) -> Optional[str]:
        """
        Filename inside the asset area that ``url`` points to, or None for
        foreign URLs and the shared placeholder.
        """
        if not url or self.url_marker not in url:
            return None
        filename = url.split(self.url_marker, 1)[1]
        if not filename or Path(filename).name != filename:
            return None
        if filename == self.placeholder:
            return None
        return filename

    def remove(self, url: Optional[str]) -> bool:
        filename = self.local_filename(url)
        if filename is None:
            return False
        try:
            self.path_for(filename).unlink()
        except FileNotFoundError:
            logger.warning("asset %s already missing", filename)
            return False
        return True
