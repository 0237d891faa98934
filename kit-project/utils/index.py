# What it does: Reads and writes the binary staging index (.git/index, "DIRC" version 2) and defines how a newly staged file replaces older entries
# How it does: A 12-byte header (magic, version, entry count) followed by one record per entry: a fixed 62-byte big-endian header, the name, then NUL padding up to the next multiple of 8
# What data structure it uses: List (entries are kept in insertion order, never re-sorted)

import struct
from dataclasses import dataclass

from .errors import BadMagic, InvalidEncoding, NotFound, TruncatedData, UnsupportedVersion

INDEX_PATH = '.git/index'
MAGIC = b'DIRC'
VERSION = 2

_HEADER = struct.Struct('>4sII')
# ctime, ctime_nsec, mtime, mtime_nsec, dev, ino, mode, uid, gid, size, sha1, flags
_ENTRY = struct.Struct('>10I20sH')
_NAME_MASK = 0x0FFF


@dataclass(frozen=True)
class Entry:
    ctime: int
    ctime_nsec: int
    mtime: int
    mtime_nsec: int
    dev: int
    ino: int
    mode: int
    uid: int
    gid: int
    size: int
    hash: bytes
    name: str

    @property
    def hex(self):
        return self.hash.hex()


@dataclass(frozen=True)
class Index:
    entries: tuple = ()


def entry_from_metadata(name, digest, metadata): # Builds an index entry for a file from its stat result
    return Entry(
        ctime=metadata.ctime,
        ctime_nsec=metadata.ctime_nsec,
        mtime=metadata.mtime,
        mtime_nsec=metadata.mtime_nsec,
        dev=metadata.dev,
        ino=metadata.ino,
        mode=metadata.mode,
        uid=metadata.uid,
        gid=metadata.gid,
        size=metadata.size,
        hash=digest,
        name=name,
    )


def _padded_size(name_length): # 62-byte header + name, rounded up so at least one NUL follows the name
    return (_ENTRY.size + name_length + 8) & ~7


def _encode_entry(entry):
    name = entry.name.encode('utf-8')
    record = _ENTRY.pack(
        entry.ctime, entry.ctime_nsec,
        entry.mtime, entry.mtime_nsec,
        entry.dev, entry.ino, entry.mode,
        entry.uid, entry.gid, entry.size,
        entry.hash, min(len(name), _NAME_MASK),
    ) + name
    return record + b'\0' * (_padded_size(len(name)) - len(record))


def _decode_entry(data, offset): # Returns (entry, offset of the next entry)
    if offset + _ENTRY.size > len(data):
        raise TruncatedData(f"index entry header at byte {offset} is truncated")

    *stat_fields, digest, flags = _ENTRY.unpack_from(data, offset)
    name_start = offset + _ENTRY.size
    name_length = flags & _NAME_MASK
    if name_length == _NAME_MASK:
        # Names this long don't fit in the flags, the name runs up to the first NUL
        name_end = data.find(b'\0', name_start)
        if name_end == -1:
            raise TruncatedData("index entry name is not terminated")
        name_length = name_end - name_start
    elif name_start + name_length > len(data):
        raise TruncatedData(f"index entry name at byte {name_start} is truncated")

    try:
        name = data[name_start:name_start + name_length].decode('utf-8')
    except UnicodeDecodeError:
        raise InvalidEncoding("index entry name is not valid UTF-8")

    return Entry(*stat_fields, digest, name), offset + _padded_size(name_length)


def encode(index):
    header = _HEADER.pack(MAGIC, VERSION, len(index.entries))
    return header + b''.join(_encode_entry(entry) for entry in index.entries)


def decode(data):
    """
    Decodes an index buffer. Anything after the last entry (extensions, a trailing
    checksum written by git) is ignored.
    """
    if data[:4] != MAGIC:
        raise BadMagic("not an index file: bad signature")
    if len(data) < _HEADER.size:
        raise TruncatedData("index header is truncated")

    _, version, count = _HEADER.unpack_from(data, 0)
    if version != VERSION:
        raise UnsupportedVersion(f"index version {version} is not supported")

    entries = []
    offset = _HEADER.size
    for _ in range(count):
        entry, offset = _decode_entry(data, offset)
        entries.append(entry)
    return Index(tuple(entries))


def update(index, new_entry):
    """
    Stages new_entry. Any existing entry with the same name or the same hash is dropped
    first, then the new entry is appended at the end.
    """
    kept = tuple(
        entry for entry in index.entries
        if entry.name != new_entry.name and entry.hash != new_entry.hash
    )
    return Index(kept + (new_entry,))


def display(index): # ls-files --stage output
    return '\n'.join(
        f'{entry.mode:06o} {entry.hex} 0\t{entry.name}'
        for entry in index.entries
    )


def read_index(fs): # Reads .git/index. A repository that has never staged anything has an empty index
    try:
        data = fs.read(INDEX_PATH)
    except NotFound:
        return Index()
    return decode(data)


def write_index(fs, index):
    fs.write(INDEX_PATH, encode(index))
