from .text import normalize


def name_matches(query: str, name: str) -> bool:
    """Exact, then every-token, then stripped-substring comparison of two names."""
    q, candidate = normalize(query), normalize(name)
    if candidate.full == q.full: return True
    if q.tokens and all(token in candidate.tokens for token in q.tokens): return True
    return bool(q.stripped) and q.stripped in candidate.stripped


def match_collections(query: str, candidates, official: bool) -> list:
    """Packs or sets whose name matches ``query``.

    A verbatim (normalized) name match wins outright: when one exists only
    the exact matches are returned.
    """
    scoped = [c for c in candidates if c.official == official]
    full = normalize(query).full
    exact = [c for c in scoped if normalize(c.name).full == full]
    if exact: return exact
    return [c for c in scoped if name_matches(query, c.name)]
