"""Dispatch registry errors."""

from __future__ import annotations


class KernelNotFoundError(KeyError):
    """No launcher was generated for the requested specialization.

    This is the only recoverable dispatch error: callers fall back to
    another plan when a specialization does not exist.
    """

    def __init__(self, key: object, table: str | None = None):
        super().__init__(key)
        self.key = key
        self.table = table

    def __str__(self) -> str:
        where = f" in {self.table}" if self.table else ""
        describe = getattr(self.key, "describe", None)
        what = describe() if callable(describe) else repr(self.key)
        return f"No kernel registered for {what}{where}"


class NullKernelEntryError(RuntimeError):
    """A registered launcher resolved to nothing: generation and registration disagree."""

    def __init__(self, table: str, key: object):
        super().__init__(f"null kernel entry registered in function_map_{table} for {key}")
        self.table = table
        self.key = key
