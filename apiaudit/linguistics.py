"""Linguistic lookups (plural nouns, CRUD verbs) used by the URL naming rules.

The NLTK-backed provider needs corpora that are downloaded once into the NLTK
data directory; ``ensure_ready()`` installs them on first use and is a no-op
afterwards. ``LexiconLinguistics`` answers from fixed tables and never touches
the network.
"""

from __future__ import annotations

import functools
import logging
import re
import socket
import threading
import time
from pathlib import Path
from typing import Callable, Iterable, Protocol, runtime_checkable

from .errors import LinguisticResourceError

logger = logging.getLogger(__name__)

DEFAULT_CRUD_VERBS = frozenset({
    "get", "set", "put", "post", "patch",
    "create", "read", "update", "delete", "remove",
    "add", "insert", "fetch", "retrieve", "modify",
    "edit", "destroy",
})

# (nltk.data.find path, nltk.download id)
NLTK_RESOURCES = (
    ("corpora/wordnet", "wordnet"),
    ("corpora/omw-1.4", "omw-1.4"),
    ("taggers/averaged_perceptron_tagger_eng", "averaged_perceptron_tagger_eng"),
)

# Runs of Unicode letters and digits; '-', '_', '.' and the like separate them
_CHUNK_RE = re.compile(r"[^\W_]+")


def _split_case(chunk: str) -> list[str]:
    words = []
    start = 0
    for i in range(1, len(chunk)):
        prev, cur = chunk[i - 1], chunk[i]
        nxt = chunk[i + 1] if i + 1 < len(chunk) else ""
        if (
            prev.isdigit() != cur.isdigit()
            or (prev.islower() and cur.isupper())
            or (prev.isupper() and cur.isupper() and nxt.islower())  # 'HTTPStatus'
        ):
            words.append(chunk[start:i])
            start = i
    words.append(chunk[start:])
    return words


def split_words(segment: str) -> list[str]:
    """'getFavoriteLectures' -> ['get', 'Favorite', 'Lectures']; also splits on '-', '_' and '.'."""
    return [word for chunk in _CHUNK_RE.findall(segment) for word in _split_case(chunk)]


@runtime_checkable
class LinguisticProvider(Protocol):
    """Capability the naming rules depend on."""

    def ensure_ready(self) -> None: ...

    def is_plural(self, word: str) -> bool: ...

    def is_crud_verb(self, word: str) -> bool: ...


def _import_nltk():
    try:
        import nltk
    except ImportError as e:
        raise LinguisticResourceError(f"nltk is not importable: {e}") from e
    return nltk


def retry_with_backoff(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    backoff_factor: float = 2.0,
    max_delay: float = 30.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
):
    """Decorator that retries a function with exponential backoff."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            delay = initial_delay
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        logger.error("%s failed after %d attempts", func.__name__, max_attempts)
                        raise
                    logger.warning("%s attempt %d/%d failed: %s", func.__name__, attempt, max_attempts, e)
                    time.sleep(delay)
                    delay = min(delay * backoff_factor, max_delay)
            raise RuntimeError("unreachable")

        return wrapper
    return decorator


class LexiconLinguistics:
    """Deterministic table lookup. Words are compared lowercased."""

    def __init__(self, plurals: Iterable[str] = (), crud_verbs: Iterable[str] = DEFAULT_CRUD_VERBS):
        self.plurals = frozenset(w.lower() for w in plurals)
        self.crud_verbs = frozenset(w.lower() for w in crud_verbs)

    def ensure_ready(self) -> None:
        return None

    def is_plural(self, word: str) -> bool:
        return word.lower() in self.plurals

    def is_crud_verb(self, word: str) -> bool:
        return word.lower() in self.crud_verbs


class NltkLinguistics:
    """Plural / verb detection with NLTK's WordNet lemmatizer and POS tagger."""

    def __init__(
        self,
        crud_verbs: Iterable[str] = DEFAULT_CRUD_VERBS,
        data_dir: str | Path | None = None,
        auto_download: bool = True,
        retries: int = 3,
        timeout: float = 30.0,
    ):
        self.crud_verbs = frozenset(w.lower() for w in crud_verbs)
        self.data_dir = Path(data_dir).expanduser() if data_dir else None
        self.auto_download = auto_download
        self.retries = max(1, retries)
        self.timeout = timeout
        self._ready = False
        self._lock = threading.Lock()
        self._lemmatizer = None

    @property
    def ready(self) -> bool:
        return self._ready

    def missing_resources(self) -> list[str]:
        """Download ids of NLTK resources not found on any data path."""
        nltk = _import_nltk()
        self._register_data_dir()
        missing = []
        for find_path, download_id in NLTK_RESOURCES:
            try:
                nltk.data.find(find_path)
            except LookupError:
                missing.append(download_id)
        return missing

    def ensure_ready(self) -> None:
        """Install missing resources once. Safe to call repeatedly and from several threads."""
        if self._ready:
            return
        with self._lock:
            if self._ready:
                return
            nltk = _import_nltk()
            missing = self.missing_resources()
            if missing:
                if not self.auto_download:
                    raise LinguisticResourceError(
                        f"NLTK resources missing: {', '.join(missing)}. Run `apiaudit setup` first."
                    )
                for resource in missing:
                    self._download(nltk, resource)
                still_missing = self.missing_resources()
                if still_missing:
                    raise LinguisticResourceError(
                        f"NLTK resources unavailable after download: {', '.join(still_missing)}"
                    )

            from nltk.stem import WordNetLemmatizer

            self._lemmatizer = WordNetLemmatizer()
            self._ready = True

    def _register_data_dir(self) -> None:
        if self.data_dir is None:
            return
        nltk = _import_nltk()
        if str(self.data_dir) not in nltk.data.path:
            nltk.data.path.append(str(self.data_dir))

    def _download(self, nltk, resource: str) -> None:
        logger.info("Downloading NLTK resource %s", resource)

        @retry_with_backoff(max_attempts=self.retries, exceptions=(OSError, LinguisticResourceError))
        def fetch() -> None:
            previous = socket.getdefaulttimeout()
            socket.setdefaulttimeout(self.timeout)
            try:
                kwargs = {"quiet": True, "raise_on_error": True}
                if self.data_dir is not None:
                    self.data_dir.mkdir(parents=True, exist_ok=True)
                    kwargs["download_dir"] = str(self.data_dir)
                ok = nltk.download(resource, **kwargs)
            except ValueError as e:  # nltk reports unknown ids / failed fetches this way
                raise LinguisticResourceError(f"Could not download {resource}: {e}") from e
            finally:
                socket.setdefaulttimeout(previous)
            if ok is False:
                raise LinguisticResourceError(f"Could not download {resource}")

        try:
            fetch()
        except OSError as e:
            raise LinguisticResourceError(f"Could not download {resource}: {e}") from e

    def _lemma(self, word: str, pos: str) -> str:
        self.ensure_ready()
        try:
            return self._lemmatizer.lemmatize(word, pos)
        except LookupError as e:
            raise LinguisticResourceError(str(e)) from e

    def _tag(self, word: str) -> str:
        self.ensure_ready()
        try:
            return _import_nltk().pos_tag([word])[0][1]
        except LookupError as e:
            raise LinguisticResourceError(str(e)) from e

    def is_plural(self, word: str) -> bool:
        w = word.lower()
        if self._lemma(w, "n") != w:
            return True
        return self._tag(w) in ("NNS", "NNPS")

    def is_crud_verb(self, word: str) -> bool:
        """Bare CRUD verbs, or inflected forms tagged as verbs ('deleting').

        Plural nouns such as 'posts' or 'updates' lemmatize to a CRUD verb
        but are tagged NNS, so they are not reported.
        """
        w = word.lower()
        if w in self.crud_verbs:
            return True
        if not self._tag(w).startswith("VB"):
            return False
        return self._lemma(w, "v") in self.crud_verbs


def build_linguistics(config) -> LinguisticProvider:
    """Provider selected by ``config.linguistics``."""
    if config.linguistics == "lexicon":
        return LexiconLinguistics(plurals=config.lexicon_plurals, crud_verbs=config.crud_verbs)
    return NltkLinguistics(
        crud_verbs=config.crud_verbs,
        data_dir=config.nltk_data_dir,
        auto_download=config.auto_download,
    )
