import pytest

from coversort.models import Rule
from coversort.rules import match_rule, normalize_domain


@pytest.mark.parametrize(
    "link, expected",
    [
        ("https://medium.com/foo", "medium.com"),
        ("https://www.medium.com/foo", "medium.com"),
        ("HTTPS://WWW.Medium.COM/Foo", "medium.com"),
        ("https://blog.medium.com/post?id=1", "blog.medium.com"),
        ("https://user:pw@news.example.org:8080/x", "news.example.org"),
        ("//cdn.example.net/x.png", "cdn.example.net"),
        ("https://wwwexample.com/", "wwwexample.com"),
    ],
)
def test_normalize_domain(link: str, expected: str) -> None:
    assert normalize_domain(link) == expected


@pytest.mark.parametrize("link", ["", None, "http://[::1/broken", "mailto:someone@example.com"])
def test_normalize_domain_invalid_is_empty(link) -> None:
    assert normalize_domain(link) == ""


def test_schemeless_link_resolves_against_fallback_host() -> None:
    # A bare path has no host of its own
    assert normalize_domain("medium.com/foo") == "example"


def test_match_exact_and_subdomain() -> None:
    rules = [Rule("medium.com", "Medium")]
    assert match_rule("medium.com", rules) == rules[0]
    assert match_rule("blog.medium.com", rules) == rules[0]


def test_match_requires_label_boundary() -> None:
    rules = [Rule("medium.com", "Medium")]
    assert match_rule("notmedium.com", rules) is None
    assert match_rule("medium.com.evil.org", rules) is None


def test_first_rule_in_list_order_wins() -> None:
    rules = [
        Rule("medium.com", "First"),
        Rule("blog.medium.com", "Second"),
        Rule("medium.com", "Duplicate"),
    ]
    assert match_rule("blog.medium.com", rules).folder == "First"
    assert match_rule("medium.com", rules).folder == "First"


def test_more_specific_rule_listed_first_wins() -> None:
    rules = [Rule("blog.medium.com", "Blog"), Rule("medium.com", "Medium")]
    assert match_rule("blog.medium.com", rules).folder == "Blog"
    assert match_rule("other.medium.com", rules).folder == "Medium"


def test_empty_domain_or_rule_never_matches() -> None:
    rules = [Rule("", "Anything"), Rule("medium.com", "Medium")]
    assert match_rule("", rules) is None
    assert match_rule("medium.com", rules).folder == "Medium"
    assert match_rule("example.org", rules) is None


def test_no_rules() -> None:
    assert match_rule("medium.com", []) is None


def test_normalized_link_matches_end_to_end() -> None:
    rules = [Rule("nytimes.com", "News")]
    assert match_rule(normalize_domain("https://www.nytimes.com/2024/01/01/a.html"), rules).folder == "News"
    assert match_rule(normalize_domain("not a url at all"), rules) is None
