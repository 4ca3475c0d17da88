from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from .base import Verifier


class VerifierRegistry:
    """Verifiers grouped by the ``alg`` header value they check."""

    def __init__(self, verifiers: Iterable[Verifier] = ()) -> None:
        self._by_algorithm: dict[str, list[Verifier]] = defaultdict(list)
        for verifier in verifiers:
            self.register(verifier)

    def register(self, verifier: Verifier) -> None:
        self._by_algorithm[verifier.algorithm].append(verifier)

    def algorithms(self) -> list[str]:
        return sorted(name for name, verifiers in self._by_algorithm.items() if verifiers)

    def find(self, algorithm: str, key_id: str | None = None) -> list[Verifier]:
        """Return the candidates for a token header.

        A verifier without a key id matches any ``kid``; one with a key id only
        matches tokens that name it.
        """

        candidates = self._by_algorithm.get(algorithm, [])
        return [
            verifier
            for verifier in candidates
            if verifier.key_id is None or verifier.key_id == key_id
        ]


__all__ = ["VerifierRegistry"]
