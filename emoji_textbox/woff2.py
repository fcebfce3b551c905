"""
WOFF2 font container validation.
Parses the WOFF2 header and table directory and rejects structurally broken files.
Table decompression (Brotli, glyf/loca transforms) is not performed.
"""

import logging
import struct
from collections import namedtuple

_LOGGER = logging.getLogger(__name__)

WOFF2_SIGNATURE = b"wOF2"
COLLECTION_FLAVOR = b"ttcf"

# signature, flavor, length, numTables, reserved, totalSfntSize,
# totalCompressedSize, majorVersion, minorVersion, metaOffset, metaLength,
# metaOrigLength, privOffset, privLength
_HEADER = struct.Struct(">4s4sIHHIIHHIIIII")
HEADER_SIZE = _HEADER.size  # 48

# Table tags indexed by the low 6 bits of the directory flags byte; 63 means
# an explicit 4-byte tag follows
KNOWN_TAGS = (
    "cmap", "head", "hhea", "hmtx", "maxp", "name", "OS/2", "post",
    "cvt ", "fpgm", "glyf", "loca", "prep", "CFF ", "VORG", "EBDT",
    "EBLC", "gasp", "hdmx", "kern", "LTSH", "PCLT", "VDMX", "vhea",
    "vmtx", "BASE", "GDEF", "GPOS", "GSUB", "EBSC", "JSTF", "MATH",
    "CBDT", "CBLC", "COLR", "CPAL", "SVG ", "sbix", "acnt", "avar",
    "bdat", "bloc", "bsln", "cvar", "fdsc", "feat", "fmtx", "fvar",
    "gvar", "hsty", "just", "lcar", "mort", "morx", "opbd", "prop",
    "trak", "Zapf", "Silf", "Glat", "Gloc", "Feat", "Sill",
)
EXPLICIT_TAG = 63

Woff2Header = namedtuple(
    "Woff2Header",
    [
        "flavor",
        "length",
        "num_tables",
        "total_sfnt_size",
        "total_compressed_size",
        "major_version",
        "minor_version",
        "meta_offset",
        "meta_length",
        "meta_orig_length",
        "priv_offset",
        "priv_length",
    ],
)

TableEntry = namedtuple(
    "TableEntry", ["tag", "transform_version", "orig_length", "transform_length"]
)

Woff2Font = namedtuple("Woff2Font", ["header", "tables", "compressed_data"])


class FontContainerError(ValueError):
    """Raised when a font container is structurally invalid."""


class _Reader:
    def __init__(self, data, pos=0):
        self.data = data
        self.pos = pos

    def read(self, n):
        if len(self.data) < self.pos + n:
            raise FontContainerError("unexpected end of data")
        b = self.data[self.pos : self.pos + n]
        self.pos += n
        return b

    def read_uint8(self):
        return self.read(1)[0]

    def read_uint_base128(self):
        """
        Read a variable-length UIntBase128 value (at most 5 bytes).

        :return: Decoded integer
        """
        value = 0
        for i in range(5):
            b = self.read_uint8()
            if i == 0 and b == 0x80:
                raise FontContainerError("leading zero in UIntBase128")
            if value & 0xFE000000:
                raise FontContainerError("overflow in UIntBase128")
            value = (value << 7) | (b & 0x7F)
            if not b & 0x80:
                return value
        raise FontContainerError("overflow in UIntBase128")


def parse_woff2_header(data):
    """
    Parse and validate the fixed 48-byte WOFF2 header.

    :param data: Complete font file contents
    :return: Woff2Header
    :raises FontContainerError: If the header is inconsistent with the data
    """
    if len(data) < HEADER_SIZE:
        raise FontContainerError("invalid font data")

    (
        signature,
        flavor,
        length,
        num_tables,
        reserved,
        total_sfnt_size,
        total_compressed_size,
        major_version,
        minor_version,
        meta_offset,
        meta_length,
        meta_orig_length,
        priv_offset,
        priv_length,
    ) = _HEADER.unpack_from(data)

    if signature != WOFF2_SIGNATURE:
        raise FontContainerError("bad signature")
    if flavor == COLLECTION_FLAVOR:
        raise FontContainerError("collections are unsupported")
    if length != len(data):
        raise FontContainerError("length in header must match file size")
    if num_tables == 0:
        raise FontContainerError("numTables in header must not be zero")
    if reserved != 0:
        raise FontContainerError("reserved in header must be zero")

    return Woff2Header(
        flavor=flavor,
        length=length,
        num_tables=num_tables,
        total_sfnt_size=total_sfnt_size,
        total_compressed_size=total_compressed_size,
        major_version=major_version,
        minor_version=minor_version,
        meta_offset=meta_offset,
        meta_length=meta_length,
        meta_orig_length=meta_orig_length,
        priv_offset=priv_offset,
        priv_length=priv_length,
    )


def _read_table_directory(reader, num_tables):
    tables = []
    for _ in range(num_tables):
        flags = reader.read_uint8()
        tag_index = flags & 0x3F
        transform_version = (flags >> 6) & 0x03
        if tag_index == EXPLICIT_TAG:
            tag = reader.read(4).decode("latin-1")
        else:
            tag = KNOWN_TAGS[tag_index]

        orig_length = reader.read_uint_base128()

        # glyf/loca are transformed with version 0, every other table with version != 0
        transformed = (tag in ("glyf", "loca")) == (transform_version == 0)
        transform_length = reader.read_uint_base128() if transformed else None
        tables.append(TableEntry(tag, transform_version, orig_length, transform_length))
    return tables


def parse_woff2(data):
    """
    Validate a WOFF2 font container and return its header and table directory.

    :param data: Complete font file contents (bytes)
    :return: Woff2Font(header, tables, compressed_data)
    :raises FontContainerError: On the first structural inconsistency found
    """
    data = bytes(data)
    header = parse_woff2_header(data)

    reader = _Reader(data, HEADER_SIZE)
    tables = _read_table_directory(reader, header.num_tables)

    by_tag = {t.tag: t for t in tables}
    glyf = by_tag.get("glyf")
    loca = by_tag.get("loca")
    if glyf is not None and glyf.transform_length is not None:
        if loca is None or loca.transform_length != 0:
            raise FontContainerError("loca transformLength must be zero")

    compressed_end = reader.pos + header.total_compressed_size
    if len(data) < compressed_end:
        raise FontContainerError("compressed data exceeds file size")
    compressed_data = data[reader.pos : compressed_end]

    if header.meta_length and len(data) < header.meta_offset + header.meta_length:
        raise FontContainerError("metadata exceeds file size")
    if header.priv_length and len(data) < header.priv_offset + header.priv_length:
        raise FontContainerError("private data exceeds file size")

    _LOGGER.debug(
        f"WOFF2 container: {header.num_tables} tables, "
        f"{header.total_compressed_size} compressed bytes"
    )
    return Woff2Font(header, tables, compressed_data)


def is_woff2(data):
    """Check whether data starts with the WOFF2 signature."""
    return bytes(data[:4]) == WOFF2_SIGNATURE
