import sys
import pathlib
import shutil
import zipfile
from xml.sax.saxutils import quoteattr

import pytest

# Ensure repo root (containing the 'xlib_host' package) is on sys.path
REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from xlib_host.core.config import Settings
from xlib_host.host import ExternalLoader
from tests.memory_host import MemoryInterface

SAMPLE_LIBRARIES = pathlib.Path(__file__).resolve().parent / 'sample_libraries'


def zip_tree(source: pathlib.Path, target: pathlib.Path) -> pathlib.Path:
    """Zip every file below ``source`` into ``target`` with bundle-relative names."""
    target.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(target, 'w', zipfile.ZIP_DEFLATED) as zf:
        for file in sorted(source.rglob('*')):
            if file.is_dir() or '__pycache__' in file.parts:
                continue
            zf.write(file, file.relative_to(source).as_posix())
    return target


def write_bundle(target: pathlib.Path, files: dict) -> pathlib.Path:
    """Build a zip bundle from a {entry_name: text} mapping."""
    target.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(target, 'w') as zf:
        for name, text in files.items():
            zf.writestr(name, text)
    return target


def descriptor_xml(*identifiers: str, requires: str | None = None) -> str:
    attr = f" requires={quoteattr(requires)}" if requires is not None else ''
    body = ''.join(f'  <xpackage>{i}</xpackage>\n' for i in identifiers)
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<xlibrary{attr}>\n{body}</xlibrary>\n'


@pytest.fixture
def memory_host():
    return MemoryInterface()


@pytest.fixture
def host_settings():
    return Settings(version='1.0.0', library_dir=None, strict_autoload=False)


@pytest.fixture
def loader(memory_host, host_settings):
    ext = ExternalLoader(memory_host, settings=host_settings)
    yield ext
    ext.unload_all()


@pytest.fixture
def sample_bundle(tmp_path):
    """Zip a sample library into tmp_path; ``file_name`` defaults to '<name>.xlib'."""
    def _build(name: str, file_name: str | None = None, subdir: str = '') -> pathlib.Path:
        source = SAMPLE_LIBRARIES / name
        assert source.is_dir(), f"unknown sample library {name}"
        return zip_tree(source, tmp_path / subdir / (file_name or f'{name}.xlib'))
    return _build


@pytest.fixture
def sample_dir(tmp_path):
    """Copy a sample library as an unpacked directory bundle."""
    def _copy(name: str, dir_name: str | None = None) -> pathlib.Path:
        target = tmp_path / (dir_name or name)
        shutil.copytree(SAMPLE_LIBRARIES / name, target, ignore=shutil.ignore_patterns('__pycache__'))
        return target
    return _copy
