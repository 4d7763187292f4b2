"""Common English words that are never blanked out by the offline generator."""
from __future__ import annotations

import logging
from pathlib import Path

_log = logging.getLogger("cloze_quizzer.stopwords")

STOP_WORDS: frozenset[str] = frozenset("""
a about above after again against all am an and any are aren as at
be because been before being below between both but by
can cannot could couldn
did didn do does doesn doing don down during
each
few for from further
had hadn has hasn have haven having he her here hers herself him himself his how
i if in into is isn it its itself
just
let ll
me more most mustn my myself
no nor not now
of off on once only or other ought our ours ourselves out over own
same shan she should shouldn so some such
than that the their theirs them themselves then there these they this those
through to too
under until up upon
very
was wasn we were weren what when where which while who whom why will with
won would wouldn
you your yours yourself yourselves
also among another anything because become becomes been besides
could every everything however many may might much must neither nothing
onto perhaps rather said say says since something still thus toward
towards upon us via whether within without yet
""".split())


def load_stop_words(path: str | Path | None = None) -> frozenset[str]:
    """Return the stop-word set, read from *path* if given.

    The file holds one word per line; blank lines and ``#`` comments are
    skipped. Words are lowercased. With no path the built-in set is returned.
    """
    if not path:
        return STOP_WORDS
    p = Path(path)
    words = set()
    for line in p.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        words.add(line.lower())
    _log.info("Loaded %d stop words from %s", len(words), p.name)
    return frozenset(words)
