from __future__ import annotations

from typing import Iterable, List

from book import FIELD_SEPARATOR
from errors import ParseError


class Member:
    """A library member and the ids of the books they currently hold."""

    def __init__(self, member_id: int, name: str, borrowed_book_ids: Iterable[int] | None = None) -> None:
        self._member_id = member_id
        self._name = name
        self._borrowed: List[int] = list(borrowed_book_ids or [])

    @property
    def member_id(self) -> int:
        return self._member_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def borrowed_book_ids(self) -> List[int]:
        return list(self._borrowed)

    def holds(self, book_id: int) -> bool:
        return book_id in self._borrowed

    def add_borrowed(self, book_id: int) -> None:
        self._borrowed.append(book_id)

    def remove_borrowed(self, book_id: int) -> None:
        # Only the first occurrence; a duplicated id stays held once more.
        self._borrowed.remove(book_id)

    def __str__(self) -> str:
        ids = " ".join(str(i) for i in self._borrowed)
        return f"Member ID: {self.member_id} | Name: {self.name} | Borrowed Book IDs: {ids}".rstrip()

    def __repr__(self) -> str:
        return f"Member(member_id={self.member_id!r}, name={self.name!r}, borrowed_book_ids={self._borrowed!r})"

    def copy(self) -> "Member":
        return Member(self.member_id, self.name, self._borrowed)

    def to_dict(self) -> dict:
        return {"member_id": self.member_id, "name": self.name, "borrowed_book_ids": self.borrowed_book_ids}

    @staticmethod
    def from_dict(data: dict) -> "Member":
        return Member(
            member_id=int(data["member_id"]),
            name=data["name"],
            borrowed_book_ids=[int(i) for i in data.get("borrowed_book_ids") or []],
        )

    def to_row(self) -> str:
        return FIELD_SEPARATOR.join([str(self.member_id), self.name] + [str(i) for i in self._borrowed])

    @staticmethod
    def from_row(line: str, line_number: int | None = None) -> "Member":
        """Parse ``memberId,name[,bookId...]``."""
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) < 2:
            raise ParseError("expected at least 2 fields, got 1", source="members", line_number=line_number)
        raw_id, name, *raw_book_ids = fields
        try:
            member_id = int(raw_id)
        except ValueError:
            raise ParseError(f"invalid member id {raw_id!r}", source="members", line_number=line_number) from None
        book_ids: List[int] = []
        for raw in raw_book_ids:
            try:
                book_ids.append(int(raw))
            except ValueError:
                raise ParseError(f"invalid book id {raw!r}", source="members", line_number=line_number) from None
        return Member(member_id, name, book_ids)
