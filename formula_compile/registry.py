"""
Formula identity and deduplication.

A FormulaRegistry maps formula text to a synthetic function name. Each distinct
text is named exactly once for the registry's lifetime; later submissions of
the same text get the existing name back and are reported as duplicates.
"""

import threading
from typing import Optional

DEFAULT_PREFIX = "Formula_"


class FormulaRegistry:
    """
    Thread-safe mapping of formula text to function name.

    Usage:
        registry = FormulaRegistry()
        registry.assign_name("a + b")  # ("Formula_1", False)
        registry.assign_name("a + b")  # ("Formula_1", True)
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        self.prefix = prefix
        self._names: dict[str, str] = {}
        self._counter = 0
        self._lock = threading.Lock()

    def assign_name(self, text: str) -> tuple[str, bool]:
        """
        Get or mint the function name for a formula.

        Returns:
            Tuple of (function name, True if the text was already named)
        """
        name = self._names.get(text)
        if name is not None:
            return name, True

        with self._lock:
            # Another caller may have minted this text since the first lookup
            name = self._names.get(text)
            if name is not None:
                return name, True

            self._counter += 1
            name = f"{self.prefix}{self._counter}"
            self._names[text] = name
            return name, False

    def get_name(self, text: str) -> Optional[str]:
        """Return the name assigned to text, or None if never seen."""
        return self._names.get(text)

    @property
    def counter(self) -> int:
        """Number of names minted so far."""
        return self._counter

    def items(self) -> list[tuple[str, str]]:
        """Snapshot of (text, name) pairs in minting order."""
        with self._lock:
            return list(self._names.items())

    def __contains__(self, text: object) -> bool:
        return text in self._names

    def __len__(self) -> int:
        return len(self._names)


_default_registry: Optional[FormulaRegistry] = None
_default_lock = threading.Lock()


def get_default_registry() -> FormulaRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = FormulaRegistry()
    return _default_registry
