"""Domain extraction and rule matching."""

import re
from typing import Iterable
from urllib.parse import urljoin, urlsplit

from .models import Rule

# Base used when a link has no scheme/host of its own
FALLBACK_BASE_URL = "http://example"

WWW_PREFIX = re.compile(r"^www\.")


def normalize_domain(link: str | None) -> str:
    """Return the lower-cased hostname of `link` without a leading "www.".

    Returns an empty string for empty or unparsable input.
    """
    if not link:
        return ""
    try:
        hostname = urlsplit(urljoin(FALLBACK_BASE_URL, link.strip())).hostname
    except ValueError:
        return ""
    if not hostname:
        return ""
    return WWW_PREFIX.sub("", hostname.lower())


def domain_matches(domain: str, rule: Rule) -> bool:
    """True if `domain` is the rule's domain or one of its subdomains."""
    if not domain or not rule.domain:
        return False
    rule_domain = rule.domain.lower()
    return domain == rule_domain or domain.endswith("." + rule_domain)


def match_rule(domain: str, rules: Iterable[Rule]) -> Rule | None:
    """Return the first rule (in list order) matching `domain`, or None."""
    if not domain:
        return None
    for rule in rules:
        if domain_matches(domain, rule):
            return rule
    return None
