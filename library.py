from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import storage
from book import Book
from errors import (
    AlreadyBorrowedError,
    NotBorrowedByMemberError,
    NotBorrowedError,
    NotFoundError,
)
from member import Member

BOOK_ID_SEED = 1000
MEMBER_ID_SEED = 5000


@dataclass(frozen=True)
class ConsistencyIssue:
    """One violation of the borrowed-flag / borrowed-list relation."""

    book_id: int
    message: str
    member_id: Optional[int] = None


class Library:
    """Owns every book and member record and the borrow relation between them.

    Callers refer to records by id only; list/find operations return
    detached copies so the two sides of the relation can only change
    through ``borrow_book`` and ``return_book``.
    """

    def __init__(self) -> None:
        self._books: Dict[int, Book] = {}
        self._members: Dict[int, Member] = {}
        self._next_book_id = BOOK_ID_SEED
        self._next_member_id = MEMBER_ID_SEED

    # ------------------------- Core operations ------------------------- #
    def add_book(self, title: str, author: str) -> int:
        book_id = self._next_book_id
        self._next_book_id += 1
        self._books[book_id] = Book(book_id, title, author)
        return book_id

    def add_member(self, name: str) -> int:
        member_id = self._next_member_id
        self._next_member_id += 1
        self._members[member_id] = Member(member_id, name)
        return member_id

    def borrow_book(self, member_id: int, book_id: int) -> None:
        member = self._require_member(member_id)
        book = self._require_book(book_id)
        if book.borrowed:
            raise AlreadyBorrowedError(f"Book {book_id} is already borrowed.")

        book.borrowed = True
        member.add_borrowed(book_id)

    def return_book(self, member_id: int, book_id: int) -> None:
        member = self._require_member(member_id)
        book = self._require_book(book_id)
        if not book.borrowed:
            raise NotBorrowedError(f"Book {book_id} was not borrowed.")
        if not member.holds(book_id):
            raise NotBorrowedByMemberError(f"Member {member_id} did not borrow book {book_id}.")

        book.borrowed = False
        member.remove_borrowed(book_id)

    def list_books(self) -> List[Book]:
        return [self._books[i].copy() for i in sorted(self._books)]

    def list_members(self) -> List[Member]:
        return [self._members[i].copy() for i in sorted(self._members)]

    def find_book(self, book_id: int) -> Optional[Book]:
        book = self._books.get(book_id)
        return book.copy() if book else None

    def find_member(self, member_id: int) -> Optional[Member]:
        member = self._members.get(member_id)
        return member.copy() if member else None

    def get_statistics(self) -> Dict[str, Any]:
        borrowed = sum(1 for b in self._books.values() if b.borrowed)
        return {
            "total_books": len(self._books),
            "borrowed_books": borrowed,
            "available_books": len(self._books) - borrowed,
            "total_members": len(self._members),
            "active_members": sum(1 for m in self._members.values() if m.borrowed_book_ids),
        }

    def check_consistency(self) -> List[ConsistencyIssue]:
        """Report every place where book flags and member lists disagree.

        Loading never cross-checks the two files, so hand-edited or stale
        data can reference unknown books, hold a book twice, or leave a
        flag out of step with the lists. Nothing is repaired here.
        """
        issues: List[ConsistencyIssue] = []
        holders: Dict[int, List[int]] = {}
        for member_id in sorted(self._members):
            for book_id in self._members[member_id].borrowed_book_ids:
                if book_id not in self._books:
                    issues.append(ConsistencyIssue(
                        book_id, f"Member {member_id} holds unknown book {book_id}.", member_id))
                    continue
                holders.setdefault(book_id, []).append(member_id)

        for book_id in sorted(self._books):
            book = self._books[book_id]
            held_by = holders.get(book_id, [])
            if book.borrowed and not held_by:
                issues.append(ConsistencyIssue(book_id, f"Book {book_id} is marked borrowed but no member holds it."))
            elif held_by and not book.borrowed:
                issues.append(ConsistencyIssue(
                    book_id, f"Book {book_id} is held by member {held_by[0]} but not marked borrowed.", held_by[0]))
            if len(held_by) > 1:
                who = ", ".join(str(m) for m in held_by)
                issues.append(ConsistencyIssue(book_id, f"Book {book_id} is held more than once (members {who})."))
        return issues

    # ------------------------- Persistence ------------------------- #
    def serialize(self) -> Tuple[str, str]:
        books = (self._books[i] for i in sorted(self._books))
        members = (self._members[i] for i in sorted(self._members))
        return storage.dump_books(books), storage.dump_members(members)

    def deserialize(self, books_blob: str, members_blob: str) -> None:
        """Replace the whole catalog with the contents of the two blobs.

        State is cleared before parsing, so a malformed blob leaves the
        catalog empty rather than restoring what was there.
        """
        self._books.clear()
        self._members.clear()
        self._next_book_id = BOOK_ID_SEED
        self._next_member_id = MEMBER_ID_SEED

        books = storage.parse_books(books_blob)
        members = storage.parse_members(members_blob)

        for book in books:
            self._books[book.id] = book
        for member in members:
            self._members[member.member_id] = member
        if self._books:
            self._next_book_id = max(BOOK_ID_SEED, max(self._books) + 1)
        if self._members:
            self._next_member_id = max(MEMBER_ID_SEED, max(self._members) + 1)

    def save(self, books_file: str = storage.DEFAULT_BOOKS_FILE,
             members_file: str = storage.DEFAULT_MEMBERS_FILE) -> None:
        books_blob, members_blob = self.serialize()
        storage.write_text(books_file, books_blob)
        storage.write_text(members_file, members_blob)

    def load(self, books_file: str = storage.DEFAULT_BOOKS_FILE,
             members_file: str = storage.DEFAULT_MEMBERS_FILE) -> None:
        # Both files are read before anything is cleared.
        books_blob = storage.read_text(books_file)
        members_blob = storage.read_text(members_file)
        self.deserialize(books_blob, members_blob)

    # ------------------------- Utilities ------------------------- #
    def _require_member(self, member_id: int) -> Member:
        member = self._members.get(member_id)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found.")
        return member

    def _require_book(self, book_id: int) -> Book:
        book = self._books.get(book_id)
        if book is None:
            raise NotFoundError(f"Book {book_id} not found.")
        return book
