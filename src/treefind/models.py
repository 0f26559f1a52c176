import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class SizeSign(Enum):
    LESS = "-"
    EQUAL = "="
    GREATER = "+"


@dataclass(frozen=True, slots=True)
class SizeFilter:
    sign: SizeSign
    size: int


@dataclass(frozen=True, slots=True)
class Query:
    root_path: str
    inum: int | None = None
    name: str | None = None
    size: SizeFilter | None = None
    nlinks: int | None = None
    exec_path: str | None = None

    @property
    def has_filters(self) -> bool:
        return any(value is not None for value in (self.inum, self.name, self.size, self.nlinks))


@dataclass(frozen=True, slots=True)
class EntryMetadata:
    path: str
    name: str
    inode: int
    size: int
    nlinks: int
    is_dir: bool

    @staticmethod
    def from_stat(path: str, name: str, st: os.stat_result) -> "EntryMetadata":
        return EntryMetadata(
            path=path,
            name=name,
            inode=st.st_ino,
            size=st.st_size,
            nlinks=st.st_nlink,
            is_dir=stat.S_ISDIR(st.st_mode),
        )


# Process outcomes reported while waiting for the exec target


@dataclass(frozen=True, slots=True)
class Exited:
    code: int

    terminal: ClassVar[bool] = True


@dataclass(frozen=True, slots=True)
class Killed:
    signal: int

    terminal: ClassVar[bool] = True


@dataclass(frozen=True, slots=True)
class Stopped:
    signal: int

    terminal: ClassVar[bool] = False


@dataclass(frozen=True, slots=True)
class Continued:
    terminal: ClassVar[bool] = False


ProcessOutcome = Exited | Killed | Stopped | Continued
