from __future__ import annotations
"""On-disk library bundles.

A bundle is either a zip archive or an unpacked directory. Both carry the
descriptor at ``META-INF/xlibrary.xml`` next to the Python modules of the
packages it declares.
"""
import zipfile
from dataclasses import dataclass
from pathlib import Path

from xlib_host.core.errors import InvalidBundleFile

DESCRIPTOR_ENTRY_PATH = 'META-INF/xlibrary.xml'
LIBRARY_SUFFIXES = ('.xlib', '.zip')


def resolve_bundle_path(path: str | Path) -> Path:
    return Path(path).expanduser().resolve()


def derive_library_name(path: str | Path) -> str:
    return Path(path).name


def looks_like_library(path: Path) -> bool:
    """Cheap check used by directory scans; load() does the real validation."""
    if path.is_dir():
        return (path / DESCRIPTOR_ENTRY_PATH).is_file()
    return path.is_file() and path.suffix.lower() in LIBRARY_SUFFIXES


@dataclass(frozen=True, slots=True)
class BundleFile:
    path: Path
    is_archive: bool

    def read_entry(self, entry: str) -> bytes | None:
        """Return the raw bytes of ``entry`` or None when the bundle lacks it."""
        if self.is_archive:
            with zipfile.ZipFile(self.path) as zf:
                try:
                    return zf.read(entry)
                except KeyError:
                    return None
        target = self.path.joinpath(*entry.split('/'))
        if not target.is_file():
            return None
        return target.read_bytes()


def open_bundle(path: Path) -> BundleFile:
    if not path.exists():
        raise InvalidBundleFile(path, 'path does not exist')
    if path.is_dir():
        return BundleFile(path=path, is_archive=False)
    try:
        with zipfile.ZipFile(path) as zf:
            bad = zf.testzip()
    except (zipfile.BadZipFile, OSError) as e:
        raise InvalidBundleFile(path, f'not a readable zip archive ({e})') from e
    if bad is not None:
        raise InvalidBundleFile(path, f'corrupt archive member {bad}')
    return BundleFile(path=path, is_archive=True)
