from pathlib import Path

import pytest

from coversort.vault.store import VaultStore, normalize_path


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Clippings/Images", "Clippings/Images"),
        ("Clippings//Images///pic.png", "Clippings/Images/pic.png"),
        ("/Clippings/Images/", "Clippings/Images"),
        ("Clippings\\Images\\pic.png", "Clippings/Images/pic.png"),
        ("a b", "a b"),
        ("Café", "Café"),
        ("", ""),
    ],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


def test_text_round_trip_keeps_line_endings(store: VaultStore, vault_path: Path) -> None:
    store.write_text("note.md", "a\r\nb\n")
    assert (vault_path / "note.md").read_bytes() == b"a\r\nb\n"


def test_write_binary_creates_new_file_only(store: VaultStore, vault_path: Path) -> None:
    store.write_binary("pic.png", b"one")
    assert (vault_path / "pic.png").read_bytes() == b"one"
    with pytest.raises(FileExistsError):
        store.write_binary("pic.png", b"two")


def test_create_folder_is_idempotent(store: VaultStore, vault_path: Path) -> None:
    store.create_folder("Clippings/Images")
    store.create_folder("Clippings/Images")
    assert (vault_path / "Clippings" / "Images").is_dir()


def test_exists_and_delete(store: VaultStore, vault_path: Path) -> None:
    assert store.exists("pic.png") is None
    (vault_path / "pic.png").write_bytes(b"x")
    assert store.exists("pic.png") == (vault_path / "pic.png").resolve()
    store.delete_entry("pic.png")
    assert store.exists("pic.png") is None


def test_paths_outside_vault_are_rejected(store: VaultStore) -> None:
    with pytest.raises(ValueError):
        store.resolve("../outside.md")
    with pytest.raises(ValueError):
        store.create_folder("a/../../outside")


def test_list_all_folders_skips_hidden(store: VaultStore, vault_path: Path) -> None:
    (vault_path / "Clippings" / "Images").mkdir(parents=True)
    (vault_path / "Books").mkdir()
    (vault_path / ".obsidian" / "plugins").mkdir(parents=True)
    (vault_path / "Books" / "note.md").write_text("x", encoding="utf-8")

    assert store.list_all_folders() == ["Books", "Clippings", "Clippings/Images"]


def test_relative(store: VaultStore, vault_path: Path) -> None:
    assert store.relative(vault_path / "Books" / "note.md") == "Books/note.md"
