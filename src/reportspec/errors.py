# -------------------------------------
# errors
# -------------------------------------
"""
Exception taxonomy for reportspec.

Every error is a ReportSpecError (a ValueError), so callers can treat any
failure as a report-generation failure with a single except clause.
"""


class ReportSpecError(ValueError):
    pass


# ============================================================
# Token resolution
# ============================================================

class UnknownLabel(ReportSpecError):
    pass


class InvalidValue(ReportSpecError):
    pass


class UnresolvedToken(ReportSpecError):
    pass


# ============================================================
# Lowering / dispatch
# ============================================================

class UnknownFunction(ReportSpecError):
    pass


class UnknownCommand(ReportSpecError):
    pass


# ============================================================
# Expansion
# ============================================================

class ExpansionMismatch(ReportSpecError):
    pass


class MixedCollection(ExpansionMismatch):
    pass


# ============================================================
# Calculation, markup, configuration
# ============================================================

class CalcError(ReportSpecError):
    pass


class MarkupError(ReportSpecError):
    pass


class ConfigError(ReportSpecError):
    pass


def with_source(err: ReportSpecError, source: str) -> ReportSpecError:
    """Return a copy of err (same type) whose message names the clause source."""
    if not source:
        return type(err)(str(err))
    return type(err)(f"{err} (in clause {source!r})")
