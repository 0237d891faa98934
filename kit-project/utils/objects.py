# What it does: Encodes and decodes the three object kinds (blob, tree, commit) to and from git's canonical byte form and computes their hashes
# How it does: Every object is stored as "<type> <length>\0<payload>". Each type has a payload encoder and a payload decoder, looked up by the type name in one table, so encode/decode/display never branch on isinstance
# What data structure it uses: Tagged union (three frozen dataclasses carrying a TYPE tag) and a dispatch table keyed by that tag

import hashlib
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from .errors import DecodeError, InvalidEncoding, UnknownType

REGULAR_FILE_MODE = 0o100644
DIRECTORY_MODE = 0o040000
DIGEST_SIZE = 20

_OCTAL_MODE = re.compile(rb'[0-7]+')


@dataclass(frozen=True)
class Blob:
    TYPE = 'blob'

    content: str

    @property
    def size(self): # Length in bytes of the encoded content, the number written in the header
        return len(self.content.encode('utf-8'))


@dataclass(frozen=True)
class TreeEntry:
    mode: int
    name: str
    hash: bytes  # raw 20-byte digest

    @property
    def hex(self):
        return self.hash.hex()


@dataclass(frozen=True)
class Tree:
    TYPE = 'tree'

    entries: tuple = ()


@dataclass(frozen=True)
class User:
    name: str
    email: str
    when: datetime  # timezone-aware, fixed offset


@dataclass(frozen=True)
class Commit:
    TYPE = 'commit'

    tree_hash: str
    parent_hash: Optional[str]  # None for the first commit
    author: User
    committer: User
    message: str


def blob_from_bytes(data): # Builds a Blob from file content. Only UTF-8 text is supported
    try:
        return Blob(data.decode('utf-8'))
    except UnicodeDecodeError:
        raise InvalidEncoding("blob content is not valid UTF-8 text")


def _encode_blob(blob):
    return blob.content.encode('utf-8')


def _decode_blob(payload):
    return blob_from_bytes(payload)


def _display_blob(blob):
    return blob.content


def _encode_tree(tree):
    return b''.join(
        f'{entry.mode:o} {entry.name}'.encode('utf-8') + b'\0' + entry.hash
        for entry in tree.entries
    )


def _decode_tree(payload):
    """
    Parses "<mode> <name>\\0<20-byte hash>" records one after another.
    Parsing stops at the first record that is incomplete or malformed, and whatever
    is left over is dropped without raising.
    Modes are kept as numbers, so only canonical modes (no leading zero, as git
    writes them) re-encode to the same bytes.
    """
    entries = []
    pos = 0
    while pos < len(payload):
        nul = payload.find(b'\0', pos)
        if nul == -1 or nul + 1 + DIGEST_SIZE > len(payload):
            break
        mode_token, sep, name = payload[pos:nul].partition(b' ')
        if not sep or not _OCTAL_MODE.fullmatch(mode_token):
            break
        try:
            mode = int(mode_token.decode('ascii'), 8)
            name = name.decode('utf-8')
        except (UnicodeDecodeError, ValueError):
            break
        entries.append(TreeEntry(mode, name, payload[nul + 1:nul + 1 + DIGEST_SIZE]))
        pos = nul + 1 + DIGEST_SIZE
    return Tree(tuple(entries))


def _display_tree(tree):
    lines = []
    for entry in tree.entries:
        kind = 'tree' if entry.mode == DIRECTORY_MODE else 'blob'
        lines.append(f'{entry.mode:06o} {kind} {entry.hex}\t{entry.name}')
    return '\n'.join(lines)


def tree_from_index(index): # Flat tree of every staged file. Mode is always a regular file
    return Tree(tuple(
        TreeEntry(REGULAR_FILE_MODE, entry.name, entry.hash)
        for entry in index.entries
    ))


def format_user(user):
    offset = int(user.when.utcoffset().total_seconds())
    sign = '-' if offset < 0 else '+'
    offset = abs(offset)
    timestamp = int(user.when.timestamp())
    return f'{user.name} <{user.email}> {timestamp} {sign}{offset // 3600:02d}{offset % 3600 // 60:02d}'


def parse_user(text):
    """
    Parses "<name> <<email>> <unix-seconds> <+-HHMM>".
    Only the hours of the offset are kept: "+0530" becomes a +5h timezone.
    """
    name, lt, rest = text.partition('<')
    email, gt, rest = rest.partition('>')
    if not lt or not gt:
        raise DecodeError(f"malformed user line: {text!r}")

    tokens = rest.split()
    if len(tokens) != 2:
        raise DecodeError(f"malformed user line: {text!r}")

    try:
        seconds = int(tokens[0])
        offset_token = int(tokens[1])
        hours = abs(offset_token) // 100
        tz = timezone(timedelta(hours=-hours if offset_token < 0 else hours))
        when = datetime.fromtimestamp(seconds, tz)
    except (ValueError, OverflowError, OSError):
        raise DecodeError(f"bad timestamp in user line: {text!r}")

    return User(name.strip(), email, when)


def _encode_commit(commit):
    lines = [f'tree {commit.tree_hash}']
    if commit.parent_hash is not None:
        lines.append(f'parent {commit.parent_hash}')
    lines.append(f'author {format_user(commit.author)}')
    lines.append(f'committer {format_user(commit.committer)}')
    return ('\n'.join(lines) + '\n\n' + commit.message).encode('utf-8')


def _decode_commit(payload):
    try:
        text = payload.decode('utf-8')
    except UnicodeDecodeError:
        raise InvalidEncoding("commit is not valid UTF-8 text")

    head, sep, message = text.partition('\n\n')
    if not sep:
        raise DecodeError("commit has no blank line before the message")

    fields = [line.split(' ', 1) for line in head.split('\n')]
    if any(len(field) != 2 for field in fields):
        raise DecodeError("commit header line without a value")

    keys = [key for key, _ in fields]
    values = [value for _, value in fields]

    # The parent line is optional, so everything after the tree shifts by one without it
    if keys == ['tree', 'author', 'committer']:
        tree_hash, author, committer = values
        parent_hash = None
    elif keys == ['tree', 'parent', 'author', 'committer']:
        tree_hash, parent_hash, author, committer = values
    else:
        raise DecodeError(f"unexpected commit header: {' '.join(keys)}")

    return Commit(tree_hash, parent_hash, parse_user(author), parse_user(committer), message)


def _display_commit(commit):
    return _encode_commit(commit).decode('utf-8')


_CODECS = {
    Blob.TYPE: (_encode_blob, _decode_blob, _display_blob),
    Tree.TYPE: (_encode_tree, _decode_tree, _display_tree),
    Commit.TYPE: (_encode_commit, _decode_commit, _display_commit),
}


def encode(obj): # Full stored form: header, NUL, payload
    encode_payload, _, _ = _CODECS[obj.TYPE]
    payload = encode_payload(obj)
    return f'{obj.TYPE} {len(payload)}\0'.encode('ascii') + payload


def decode(data):
    """
    Decodes a full "<type> <length>\\0<payload>" buffer into a Blob, Tree or Commit.
    The declared length is not checked against the payload.
    """
    header, sep, payload = data.partition(b'\0')
    if not sep:
        raise DecodeError("object has no header terminator")

    tokens = header.split()
    obj_type = tokens[0].decode('latin-1') if tokens else ''
    if obj_type not in _CODECS:
        raise UnknownType(f"unknown object type: {obj_type!r}")

    _, decode_payload, _ = _CODECS[obj_type]
    return decode_payload(payload)


def display(obj): # Human readable form used by cat-file
    _, _, display_object = _CODECS[obj.TYPE]
    return display_object(obj)


def object_digest(obj): # Raw 20-byte SHA-1 of the encoded form
    return hashlib.sha1(encode(obj)).digest()


def hash_object(obj): # Hex SHA-1 of the encoded form
    return hashlib.sha1(encode(obj)).hexdigest()
