"""Extraction of map archives uploaded from the sensor unit."""

import asyncio
import shutil
import time
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from patchpoint.exceptions import InvalidArchiveError, MapNotFoundError
from patchpoint.utils.logger import get_logger

log = get_logger(__name__)

MAP_FILENAME = "pothole_map.html"


@dataclass(frozen=True)
class ExtractedMap:
    """Location of an extracted map, relative to the uploads root."""

    timestamp: str
    map_path: str
    extract_dir: str

    @property
    def map_url(self) -> str:
        return f"/uploads/{self.map_path}"


class MapArchiveService:
    """Stores zip uploads and exposes the map page they contain."""

    def __init__(self, upload_root: Path):
        self.upload_root = Path(upload_root)
        self.zips_dir = self.upload_root / "zips"
        self.maps_dir = self.upload_root / "pi_maps"

    def ensure_dirs(self) -> None:
        for directory in (self.upload_root, self.zips_dir, self.maps_dir):
            directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def is_zip_filename(filename: Optional[str]) -> bool:
        return bool(filename) and Path(filename).suffix.lower() == ".zip"

    async def store_and_extract(self, content: bytes, timestamp: Optional[str] = None) -> ExtractedMap:
        """
        Save the archive and extract it off the event loop.

        Raises:
            InvalidArchiveError: If the bytes are not a readable zip or members
                would escape the extraction directory
            MapNotFoundError: If no ``pothole_map.html`` is inside
        """
        stamp = timestamp or str(int(time.time() * 1000))
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._store_and_extract_sync, content, stamp)

    def _store_and_extract_sync(self, content: bytes, stamp: str) -> ExtractedMap:
        self.ensure_dirs()
        zip_path = self.zips_dir / f"{stamp}.zip"
        zip_path.write_bytes(content)

        extract_dir = self.maps_dir / stamp
        extract_dir.mkdir(parents=True, exist_ok=True)

        try:
            map_file = self._extract(zip_path, extract_dir)
        except Exception:
            self._discard(zip_path, extract_dir)
            raise

        extracted = ExtractedMap(
            timestamp=stamp,
            map_path=map_file.relative_to(self.upload_root).as_posix(),
            extract_dir=extract_dir.relative_to(self.upload_root).as_posix(),
        )
        log.info("map archive extracted", map_url=extracted.map_url, size=len(content))
        return extracted

    def _extract(self, zip_path: Path, extract_dir: Path) -> Path:
        try:
            with zipfile.ZipFile(zip_path) as archive:
                self._check_members(archive, extract_dir)
                archive.extractall(extract_dir)
        except zipfile.BadZipFile:
            log.warning("zip upload unreadable", path=str(zip_path))
            raise InvalidArchiveError(message="Uploaded file is not a valid ZIP archive")

        map_file = self._find_map(extract_dir)
        if map_file is None:
            log.warning("zip upload missing map", extract_dir=str(extract_dir))
            raise MapNotFoundError(MAP_FILENAME)
        return map_file

    @staticmethod
    def _discard(zip_path: Path, extract_dir: Path) -> None:
        zip_path.unlink(missing_ok=True)
        shutil.rmtree(extract_dir, ignore_errors=True)

    @staticmethod
    def _check_members(archive: zipfile.ZipFile, extract_dir: Path) -> None:
        root = extract_dir.resolve()
        for name in archive.namelist():
            target = (extract_dir / name).resolve()
            if target != root and root not in target.parents:
                raise InvalidArchiveError(
                    message="Archive contains paths outside the extraction directory",
                    details={"member": name},
                )

    @staticmethod
    def _find_map(extract_dir: Path) -> Optional[Path]:
        matches = sorted(p for p in extract_dir.rglob(MAP_FILENAME) if p.is_file())
        return matches[0] if matches else None
