"""Test doubles shared by the codec tests."""

from dbcrypt.provider import AlgorithmProvider, SymmetricAlgorithm


class RecordingProvider:
    """Wraps a provider and keeps every handle it hands out."""

    def __init__(self, inner: AlgorithmProvider) -> None:
        self._inner = inner
        self.handles: list[SymmetricAlgorithm] = []

    def create_algorithm(self) -> SymmetricAlgorithm:
        handle = self._inner.create_algorithm()
        self.handles.append(handle)
        return handle
