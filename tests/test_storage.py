import os

import pytest

import storage
from book import Book
from errors import ErrorKind, ParseError, StorageError
from library import Library
from member import Member


def _populated():
    lib = Library()
    dune = lib.add_book("Dune", "Frank Herbert")
    emma = lib.add_book("Emma", "Jane Austen")
    kim = lib.add_book("Kim", "Rudyard Kipling")
    alice = lib.add_member("Alice")
    bob = lib.add_member("Bob")
    lib.add_member("Carol")
    lib.borrow_book(alice, kim)
    lib.borrow_book(alice, dune)
    lib.borrow_book(bob, emma)
    lib.return_book(bob, emma)
    return lib


def test_serialize_format():
    books_blob, members_blob = _populated().serialize()
    assert books_blob == (
        "1000,Dune,Frank Herbert,1\n"
        "1001,Emma,Jane Austen,0\n"
        "1002,Kim,Rudyard Kipling,1\n"
    )
    assert members_blob == "5000,Alice,1002,1000\n5001,Bob\n5002,Carol\n"


def test_serialize_is_repeatable_and_read_only():
    lib = _populated()
    assert lib.serialize() == lib.serialize()
    assert lib.add_book("New", "Author") == 1003


def test_round_trip_preserves_records():
    original = _populated()
    restored = Library()
    restored.deserialize(*original.serialize())

    assert [b.to_dict() for b in restored.list_books()] == [b.to_dict() for b in original.list_books()]
    assert [m.to_dict() for m in restored.list_members()] == [m.to_dict() for m in original.list_members()]
    assert restored.find_member(5000).borrowed_book_ids == [1002, 1000]


def test_deserialize_replaces_existing_state(lib):
    lib.add_book("Old", "Book")
    lib.add_member("Old Member")
    lib.deserialize("1007,Dune,Herbert,0\n", "")

    assert [b.id for b in lib.list_books()] == [1007]
    assert lib.list_members() == []


def test_counters_resume_after_highest_loaded_id(lib):
    lib.deserialize("1000,A,X,0\n1041,B,Y,0\n1003,C,Z,0\n", "5010,Alice\n")
    assert lib.add_book("Next", "Author") == 1042
    assert lib.add_member("Next") == 5011


def test_counters_never_drop_below_seed(lib):
    lib.add_book("Dune", "Herbert")
    lib.add_book("Emma", "Austen")
    lib.deserialize("3,Low,Id,0\n", "7,Low\n")
    assert lib.add_book("Next", "Author") == 1000
    assert lib.add_member("Next") == 5000


def test_empty_load_resets_counters(lib):
    lib.add_book("Dune", "Herbert")
    lib.deserialize("", "")
    assert lib.add_book("Dune", "Herbert") == 1000


def test_member_line_keeps_borrowed_order(lib):
    lib.deserialize("", "5000,Alice,1000,1002\n")
    assert lib.find_member(5000).borrowed_book_ids == [1000, 1002]


def test_blank_lines_are_skipped(lib):
    lib.deserialize("\n1000,Dune,Herbert,0\n\n   \n", "\n5000,Alice\r\n\r\n")
    assert len(lib.list_books()) == 1
    assert lib.find_member(5000).name == "Alice"


@pytest.mark.parametrize("line", [
    "1000,Dune,Herbert",
    "1000",
    "1000,Dune,Frank, Herbert,0",
    "abc,Dune,Herbert,0",
    "1000,Dune,Herbert,yes",
])
def test_malformed_book_lines(line):
    with pytest.raises(ParseError) as excinfo:
        storage.parse_books(f"1001,Emma,Austen,0\n{line}\n")
    assert excinfo.value.kind is ErrorKind.PARSE_ERROR
    assert excinfo.value.line_number == 2
    assert excinfo.value.source == "books"


@pytest.mark.parametrize("line", ["5000", "x,Alice", "5000,Alice,10x0", "5000,Alice,"])
def test_malformed_member_lines(line):
    with pytest.raises(ParseError, match="members line 1"):
        storage.parse_members(line + "\n")


def test_duplicate_ids_keep_first_row():
    books = storage.parse_books("1000,Dune,Herbert,0\n1000,Emma,Austen,1\n")
    assert [b.to_dict() for b in books] == [{"id": 1000, "title": "Dune", "author": "Herbert", "borrowed": False}]
    members = storage.parse_members("5000,Alice\n5000,Bob,1000\n")
    assert members[0].name == "Alice"


def test_record_dict_helpers():
    book = Book.from_dict({"id": "1000", "title": "Dune", "author": "Herbert", "borrowed": True})
    assert book.to_row() == "1000,Dune,Herbert,1"
    member = Member.from_dict({"member_id": 5000, "name": "Alice", "borrowed_book_ids": ["1000"]})
    assert member.to_row() == "5000,Alice,1000"


def test_save_and_load_files(data_files):
    original = _populated()
    original.save(data_files.books, data_files.members)

    with open(data_files.books, encoding="utf-8") as f:
        assert f.readline() == "1000,Dune,Frank Herbert,1\n"

    restored = Library()
    restored.load(data_files.books, data_files.members)
    assert restored.serialize() == original.serialize()


def test_load_missing_files_reads_as_empty(lib, data_files):
    lib.add_book("Dune", "Herbert")
    lib.load(data_files.books, data_files.members)
    assert lib.list_books() == []
    assert not os.path.exists(data_files.books)


def test_load_unreadable_file_keeps_state(lib, tmp_path, data_files):
    lib.add_book("Dune", "Herbert")
    directory = str(tmp_path / "not_a_file")
    os.mkdir(directory)

    with pytest.raises(StorageError) as excinfo:
        lib.load(directory, data_files.members)
    assert excinfo.value.kind is ErrorKind.IO_ERROR
    assert [b.title for b in lib.list_books()] == ["Dune"]


def test_save_to_missing_directory(lib, tmp_path):
    target = str(tmp_path / "missing" / "books.csv")
    with pytest.raises(StorageError, match="for writing"):
        lib.save(target, str(tmp_path / "members.csv"))


@pytest.mark.parametrize("text", ["Vol\x0c1", "Part\x0bTwo", "Sep\x1cA", "Next\x85Line", "Para\u2028graph", "Block\u2029End"])
def test_round_trip_keeps_unusual_line_characters(text):
    original = Library()
    book_id = original.add_book(text, "Author")
    member_id = original.add_member(text)
    original.borrow_book(member_id, book_id)

    restored = Library()
    restored.deserialize(*original.serialize())
    assert restored.find_book(book_id).title == text
    assert restored.find_member(member_id).name == text
    assert restored.find_member(member_id).borrowed_book_ids == [book_id]


def test_windows_line_endings_are_trimmed(lib):
    lib.deserialize("1000,Dune,Herbert,1\r\n", "5000,Alice,1000\r\n")
    assert lib.find_book(1000).borrowed is True
    assert lib.find_member(5000).borrowed_book_ids == [1000]


def test_load_non_utf8_file_raises_storage_error(lib, data_files):
    lib.add_book("Dune", "Herbert")
    with open(data_files.books, "wb") as f:
        f.write("1000,L'Étranger,Camus,0\n".encode("latin-1"))

    with pytest.raises(StorageError, match="not valid UTF-8") as excinfo:
        lib.load(data_files.books, data_files.members)
    assert excinfo.value.kind is ErrorKind.IO_ERROR
    assert excinfo.value.path == data_files.books
    assert [b.title for b in lib.list_books()] == ["Dune"]
