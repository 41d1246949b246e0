from __future__ import annotations
"""Library descriptor (``META-INF/xlibrary.xml``) parsing.

The descriptor lists the packages of a library, one ``<xpackage>`` element
per package, in load order::

    <xlibrary requires=">=1.0">
      <xpackage>examples.hello.Greeter</xpackage>
    </xlibrary>

The optional ``requires`` attribute is a PEP 440 specifier matched against
the host version.
"""
import re
import xml.etree.ElementTree as ET
from typing import List, Optional

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, ValidationError, field_validator

from xlib_host.core.errors import (
    DescriptorInvalid,
    DescriptorMalformed,
    DescriptorMissing,
    IncompatibleLibrary,
)
from .bundle import DESCRIPTOR_ENTRY_PATH, BundleFile

IDENTIFIER_PATTERN = re.compile(r'[A-Za-z][A-Za-z0-9]*(\.[A-Za-z][A-Za-z0-9]*)*')
PACKAGE_TAG = 'xpackage'


def is_valid_identifier(identifier: str) -> bool:
    return isinstance(identifier, str) and IDENTIFIER_PATTERN.fullmatch(identifier) is not None


class LibraryDescriptor(BaseModel):
    packages: List[str]
    requires: Optional[str] = None

    @field_validator('packages')
    @classmethod
    def _check_packages(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError('library contains no packages')
        for identifier in value:
            if not is_valid_identifier(identifier):
                raise ValueError(f"'{identifier}' is not a valid package identifier")
        return value

    @field_validator('requires')
    @classmethod
    def _check_requires(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        try:
            SpecifierSet(value)
        except InvalidSpecifier as e:
            raise ValueError(f"'{value}' is not a valid version specifier") from e
        return value

    def host_compatible(self, host_version: str) -> bool:
        if self.requires is None:
            return True
        try:
            return SpecifierSet(self.requires).contains(Version(host_version), prereleases=True)
        except InvalidVersion:
            return False


def _local_name(tag) -> str:
    # "{urn}xpackage" under a default xmlns; comments and PIs carry non-str tags
    if not isinstance(tag, str):
        return ''
    return tag.rpartition('}')[2]


def parse_descriptor(data: bytes) -> LibraryDescriptor:
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise DescriptorMalformed(f"The descriptor file could not be parsed: {e}") from e
    packages = [''.join(node.itertext()).strip() for node in root.iter() if _local_name(node.tag) == PACKAGE_TAG]
    try:
        return LibraryDescriptor(packages=packages, requires=root.get('requires'))
    except ValidationError as e:
        details = '; '.join(_error_message(err) for err in e.errors())
        raise DescriptorInvalid(f"Library descriptor was invalid: {details}") from e


def _error_message(err: dict) -> str:
    msg = str(err.get('msg', ''))
    # pydantic prefixes validator ValueErrors with "Value error, "
    prefix = 'Value error, '
    return msg[len(prefix):] if msg.startswith(prefix) else msg


def read_descriptor(bundle: BundleFile) -> LibraryDescriptor:
    try:
        data = bundle.read_entry(DESCRIPTOR_ENTRY_PATH)
    except OSError as e:
        raise DescriptorMalformed(f"The descriptor file could not be read: {e}") from e
    if data is None:
        raise DescriptorMissing(f"Library descriptor {DESCRIPTOR_ENTRY_PATH} could not be found")
    return parse_descriptor(data)


def check_host_version(descriptor: LibraryDescriptor, host_version: str) -> None:
    if not descriptor.host_compatible(host_version):
        raise IncompatibleLibrary(descriptor.requires or '', host_version)
