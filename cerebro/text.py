import re
import unicodedata
from typing import NamedTuple

_DISALLOWED = re.compile(r'[^a-z0-9 -]')
_NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]')


class NormalizedText(NamedTuple):
    full: str
    tokens: list
    stripped: str


def normalize(raw: str) -> NormalizedText:
    """Reduce free text to the three forms used for name matching.

    ``full`` keeps letters, digits, spaces and hyphens after dropping
    diacritics; ``tokens`` splits it on spaces and hyphens; ``stripped``
    keeps only letters and digits.
    """
    decomposed = unicodedata.normalize('NFD', raw or '').lower()
    full = _DISALLOWED.sub('', decomposed)
    tokens = full.replace('-', ' ').split()
    stripped = _NON_ALPHANUMERIC.sub('', full)
    return NormalizedText(full, tokens, stripped)


def strip_diacritics(raw: str) -> str:
    decomposed = unicodedata.normalize('NFD', raw or '')
    return ''.join(c for c in decomposed if not unicodedata.combining(c)).lower()


def has_alphanumeric(raw: str) -> bool:
    return bool(re.search(r'[a-z0-9]', raw or '', re.IGNORECASE))
