from __future__ import annotations

from errors import ParseError

FIELD_SEPARATOR = ","
BOOK_FIELD_COUNT = 4


class Book:
    """Represents a single book in the catalog."""

    def __init__(self, book_id: int, title: str, author: str, borrowed: bool = False) -> None:
        self._id = book_id
        self._title = title
        self._author = author
        self.borrowed = borrowed

    @property
    def id(self) -> int:
        return self._id

    @property
    def title(self) -> str:
        return self._title

    @property
    def author(self) -> str:
        return self._author

    def __str__(self) -> str:
        state = "Yes" if self.borrowed else "No"
        return f"ID: {self.id} | Title: {self.title} | Author: {self.author} | Borrowed: {state}"

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r}, borrowed={self.borrowed!r})"

    def copy(self) -> "Book":
        return Book(self.id, self.title, self.author, self.borrowed)

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "author": self.author, "borrowed": self.borrowed}

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(
            book_id=int(data["id"]),
            title=data["title"],
            author=data["author"],
            borrowed=bool(data.get("borrowed", False)),
        )

    def to_row(self) -> str:
        flag = "1" if self.borrowed else "0"
        return FIELD_SEPARATOR.join([str(self.id), self.title, self.author, flag])

    @staticmethod
    def from_row(line: str, line_number: int | None = None) -> "Book":
        """Parse ``id,title,author,flag``. Title and author are taken verbatim."""
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) != BOOK_FIELD_COUNT:
            raise ParseError(
                f"expected {BOOK_FIELD_COUNT} fields, got {len(fields)}",
                source="books",
                line_number=line_number,
            )
        raw_id, title, author, flag = fields
        try:
            book_id = int(raw_id)
        except ValueError:
            raise ParseError(f"invalid book id {raw_id!r}", source="books", line_number=line_number) from None
        if flag not in ("0", "1"):
            raise ParseError(f"invalid borrowed flag {flag!r}", source="books", line_number=line_number)
        return Book(book_id, title, author, borrowed=flag == "1")
