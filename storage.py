r"""Flat-file persistence for the catalog.

Two text files hold the whole catalog: one row per book
(``id,title,author,flag``) and one row per member
(``memberId,name[,bookId...]``). Fields are not escaped, so a comma inside
a title, author or name splits the row on reload.

Rows are separated by ``\n`` only; one trailing ``\r`` per row is dropped
so files edited on Windows still load. Other control characters, such as
form feeds, stay inside the field they were written in.

Two parsing choices are stricter or looser than a plain ``getline`` loop:
lines holding only whitespace are skipped like empty ones, and an empty
trailing field (``5000,Alice,``) is a ``ParseError`` rather than a member
with no borrowed books, since ``dump_members`` never writes one.
"""

import logging
import os
from typing import Dict, Iterable, List

from book import Book
from errors import StorageError
from member import Member

logger = logging.getLogger(__name__)

DEFAULT_BOOKS_FILE = "books.csv"
DEFAULT_MEMBERS_FILE = "members.csv"


def _rows(blob: str):
    """Yield ``(line_number, line)`` for every non-blank line."""
    for number, line in enumerate(blob.split("\n"), 1):
        if line.endswith("\r"):
            line = line[:-1]
        if not line.strip():
            continue
        yield number, line


def dump_books(books: Iterable[Book]) -> str:
    return "".join(f"{book.to_row()}\n" for book in books)


def dump_members(members: Iterable[Member]) -> str:
    return "".join(f"{member.to_row()}\n" for member in members)


def parse_books(blob: str) -> List[Book]:
    seen: Dict[int, Book] = {}
    for number, line in _rows(blob):
        book = Book.from_row(line, number)
        if book.id in seen:
            logger.warning(f"Duplicate book id {book.id} on line {number} ignored")
            continue
        seen[book.id] = book
    return list(seen.values())


def parse_members(blob: str) -> List[Member]:
    seen: Dict[int, Member] = {}
    for number, line in _rows(blob):
        member = Member.from_row(line, number)
        if member.member_id in seen:
            logger.warning(f"Duplicate member id {member.member_id} on line {number} ignored")
            continue
        seen[member.member_id] = member
    return list(seen.values())


def read_text(path: str) -> str:
    """Read a catalog file. A file that does not exist reads as empty."""
    if not os.path.exists(path):
        logger.warning(f"Catalog file not found: {path} (treating as empty)")
        return ""
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except OSError as exc:
        raise StorageError(f"Failed to open {path} for reading: {exc.strerror or exc}", path=path) from exc
    except UnicodeDecodeError as exc:
        raise StorageError(f"{path} is not valid UTF-8 (byte {exc.start})", path=path) from exc
    logger.debug(f"Read {len(text)} characters from {path}")
    return text


def write_text(path: str, text: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as exc:
        raise StorageError(f"Failed to open {path} for writing: {exc.strerror or exc}", path=path) from exc
    logger.debug(f"Wrote {len(text)} characters to {path}")
