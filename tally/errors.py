# errors.py - Exception Taxonomy
# ============================================================================
# FILE: tally/errors.py
# Errors raised by histograms, accumulators and the configuration layer
# ============================================================================


class TallyError(Exception):
    """Base class for all tally errors."""
    pass


class ConfigurationError(TallyError, ValueError):
    """
    Raised when a metric is built with invalid parameters.

    Only ever raised at construction (or configuration load) time,
    never from observe/add/tick.
    """
    pass


class NoDataError(TallyError, ArithmeticError):
    """Raised when averaging an interval that received no updates."""
    pass
