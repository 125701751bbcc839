"""Typed objects held by the content store.

Every stored object is framed Git-style as ``b"<type> <size>\\0" + payload``.
The type tag in the header is the discriminant used when objects are read
back, so commit history can be recovered without guessing from content.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Tuple, Type

from snapvcs.constants import BLOB_TYPE, COMMIT_TYPE, TREE_TYPE
from snapvcs.errors import FormatError

# "Mon Jan 2 15:04:05 2006 -0700"
LOCAL_DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"
# "Mon, 02 Jan 2006 15:04:05 MST"
RFC1123_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S %Z"
# Used when the zone has no abbreviation, e.g. "Mon, 02 Jan 2006 15:04:05 -0700"
RFC1123_NUMERIC_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S %z"

_COMMIT_RE = re.compile(
    r"\Acommit (?P<local_date>[^\n]*)\n"
    r"Author: (?P<author>[^\n]*) <(?P<email>[^\n]*)>\n"
    r"Date: (?P<rfc_date>[^\n]*)\n"
    r"\n"
    r"(?P<message>.*)\n\Z",
    re.DOTALL,
)


class StoredObject(ABC):
    """Base class for everything the content store can hold."""

    type_name: ClassVar[str]

    @abstractmethod
    def serialize(self) -> bytes:
        """Return the payload bytes (without the type header)."""

    @classmethod
    @abstractmethod
    def deserialize(cls, payload: bytes) -> "StoredObject":
        """Rebuild the object from payload bytes."""


@dataclass(frozen=True)
class Blob(StoredObject):
    """Raw file content."""

    type_name: ClassVar[str] = BLOB_TYPE

    data: bytes

    def serialize(self) -> bytes:
        return self.data

    @classmethod
    def deserialize(cls, payload: bytes) -> "Blob":
        return cls(payload)


@dataclass(frozen=True)
class CommitRecord(StoredObject):
    """A commit: author identity, two renderings of the commit time, message.

    Commits carry no parent link; history is recovered by walking the store.
    """

    type_name: ClassVar[str] = COMMIT_TYPE

    author: str
    email: str
    local_date: str
    rfc_date: str
    message: str

    @classmethod
    def create(
        cls, author: str, email: str, message: str, when: datetime
    ) -> "CommitRecord":
        """Build a record for ``when`` (an aware datetime)."""
        # Day of month is not zero padded in the local form
        local_date = f"{when:%a %b} {when.day} {when:%H:%M:%S %Y %z}"
        zone = when.tzname()
        if zone and zone.isalpha():
            rfc_date = when.strftime(RFC1123_DATE_FORMAT)
        else:
            rfc_date = when.strftime(RFC1123_NUMERIC_DATE_FORMAT)
        return cls(author, email, local_date, rfc_date, message)

    @property
    def timestamp(self) -> datetime:
        """Commit time parsed from the local date line."""
        try:
            return datetime.strptime(self.local_date, LOCAL_DATE_FORMAT)
        except ValueError as e:
            raise FormatError(f"Invalid commit date {self.local_date!r}: {e}") from e

    def to_text(self) -> str:
        return (
            f"commit {self.local_date}\n"
            f"Author: {self.author} <{self.email}>\n"
            f"Date: {self.rfc_date}\n"
            f"\n"
            f"{self.message}\n"
        )

    def serialize(self) -> bytes:
        return self.to_text().encode("utf-8")

    @classmethod
    def deserialize(cls, payload: bytes) -> "CommitRecord":
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(f"Commit is not valid UTF-8: {e}") from e

        match = _COMMIT_RE.match(text)
        if match is None:
            raise FormatError("Malformed commit record")
        return cls(
            author=match.group("author"),
            email=match.group("email"),
            local_date=match.group("local_date"),
            rfc_date=match.group("rfc_date"),
            message=match.group("message"),
        )


@dataclass(frozen=True)
class Tree(StoredObject):
    """Flat listing of (mode, path, hash) entries.

    Nothing writes trees yet; the type exists so stores that contain one
    still decode.
    """

    type_name: ClassVar[str] = TREE_TYPE

    entries: Tuple[Tuple[str, str, str], ...] = ()

    def serialize(self) -> bytes:
        lines = [f"{mode} {obj_hash} {path}\n" for mode, path, obj_hash in self.entries]
        return "".join(lines).encode("utf-8")

    @classmethod
    def deserialize(cls, payload: bytes) -> "Tree":
        entries = []
        for line in payload.decode("utf-8").splitlines():
            if not line:
                continue
            parts = line.split(" ", 2)
            if len(parts) != 3:
                raise FormatError(f"Invalid tree entry: {line!r}")
            mode, obj_hash, path = parts
            entries.append((mode, path, obj_hash))
        return cls(tuple(entries))


OBJECT_TYPES = {
    BLOB_TYPE: Blob,
    COMMIT_TYPE: CommitRecord,
    TREE_TYPE: Tree,
}


def encode_object(obj: StoredObject) -> bytes:
    """Frame an object as ``<type> <size>\\0<payload>``."""
    payload = obj.serialize()
    header = f"{obj.type_name} {len(payload)}\0".encode("ascii")
    return header + payload


def split_header(raw: bytes) -> Tuple[str, bytes]:
    """Split raw stored bytes into (type name, payload).

    Raises:
        FormatError: If the header is missing, unknown, or the size is wrong
    """
    nul = raw.find(b"\0")
    if nul < 0:
        raise FormatError("Object has no header")

    try:
        type_name, size_str = raw[:nul].decode("ascii").split(" ")
        size = int(size_str)
    except ValueError as e:
        raise FormatError(f"Invalid object header: {raw[:nul]!r}") from e

    if type_name not in OBJECT_TYPES:
        raise FormatError(f"Unknown object type: {type_name}")

    payload = raw[nul + 1:]
    if len(payload) != size:
        raise FormatError(
            f"Object size mismatch: header says {size}, got {len(payload)}"
        )
    return type_name, payload


def decode_object(raw: bytes) -> StoredObject:
    """Decode framed bytes into Blob, CommitRecord or Tree."""
    type_name, payload = split_header(raw)
    object_cls: Type[StoredObject] = OBJECT_TYPES[type_name]
    return object_cls.deserialize(payload)
