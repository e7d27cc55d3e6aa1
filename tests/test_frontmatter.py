from datetime import date

import pytest

from coversort.vault.frontmatter import coerce_text, decode, encode, first_text, rewrite


NOTE = "\n".join(
    [
        "---",
        "title: Dune",
        "author: Frank Herbert",
        "tags:",
        "  - books",
        "  - scifi",
        "image: https://cdn.x/pic.png",
        "---",
        "",
        "# Dune",
        "",
        "Body with --- dashes and: colons",
        "---",
        "trailing  spaces  ",
        "",
    ]
)


def test_decode_reads_mapping() -> None:
    data = decode(NOTE)
    assert data == {
        "title": "Dune",
        "author": "Frank Herbert",
        "tags": ["books", "scifi"],
        "image": "https://cdn.x/pic.png",
    }


def test_decode_without_block_is_none() -> None:
    assert decode("# Just a note\n") is None
    assert decode("\n---\ntitle: x\n---\n") is None  # block must start the document


def test_decode_invalid_yaml_is_none() -> None:
    assert decode("---\ntitle: [unclosed\n---\nbody") is None


@pytest.mark.parametrize("line", ["published: 2024-13-45", "x: !!int abc"])
def test_decode_unconstructible_value_is_none(line: str) -> None:
    assert decode(f"---\n{line}\n---\nbody") is None


def test_decode_non_mapping_is_none() -> None:
    assert decode("---\n- a\n- b\n---\nbody") is None
    assert decode("---\njust a string\n---\nbody") is None


def test_decode_empty_block_is_empty_mapping() -> None:
    assert decode("---\n\n---\nbody") == {}


def test_closing_delimiter_must_be_whole_line() -> None:
    assert decode("---\ntitle: x\n--- trailing\n") is None
    assert decode("---\ntitle: x\n---") == {"title": "x"}


def test_encode_keeps_key_order() -> None:
    block = encode({"zeta": 1, "alpha": 2})
    assert block.startswith("---\n")
    assert block.endswith("\n---")
    assert block.index("zeta") < block.index("alpha")


@pytest.mark.parametrize(
    "mapping",
    [
        {},
        {"title": "Dune"},
        {"n": 3, "f": 1.5, "flag": True, "none": None},
        {"tags": ["a", "b"], "nested": {"k": [1, {"deep": "v"}]}},
        {"published": date(2024, 1, 2), "quote": "it's: #1 -- \"yes\""},
        {"unicode": "Café – 東京", "multiline": "line one\nline two\n"},
        {"image": "[[Dune-Frank Herbert.png]]", "empty": "", "numeric_string": "007"},
    ],
)
def test_decode_encode_round_trip(mapping: dict) -> None:
    assert decode(encode(mapping) + "\nbody") == mapping


def test_rewrite_replaces_only_the_header() -> None:
    data = decode(NOTE)
    data["image"] = "[[Dune-Frank Herbert.png]]"

    rewritten = rewrite(NOTE, data)

    body = NOTE[NOTE.index("\n---\n") + len("\n---"):]
    assert rewritten.endswith(body)
    assert decode(rewritten) == data


def test_rewrite_preserves_body_bytes_exactly() -> None:
    body = "\n\r\n  odd\tspacing  \n\n---\nnot: frontmatter\n"
    text = "---\nimage: x\n---" + body
    assert rewrite(text, {"image": "y"}).endswith(body)


def test_rewrite_without_block_raises() -> None:
    with pytest.raises(ValueError):
        rewrite("no header", {"a": 1})


def test_first_text_fallback_order() -> None:
    data = {"link": "https://b", "url": "https://c"}
    assert first_text(data, ("Link", "link", "url")) == "https://b"
    assert first_text({"Link": "", "url": "https://c"}, ("Link", "link", "url")) == "https://c"
    assert first_text({"Link": None}, ("Link", "link", "url")) is None


def test_coerce_text() -> None:
    assert coerce_text("x") == "x"
    assert coerce_text(42) == "42"
    assert coerce_text(False) == "false"
    assert coerce_text(date(2024, 5, 6)) == "2024-05-06"
    assert coerce_text(["Ann", "Bob"]) == "Ann, Bob"
    assert coerce_text({"a": 1}) is None
    assert coerce_text([]) is None
    assert coerce_text(None) is None
