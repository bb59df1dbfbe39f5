"""Exceptions that abort a compile run."""


class CompileError(RuntimeError):
    """Fatal compile condition; the CLI reports it and exits non-zero."""
