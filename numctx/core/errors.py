"""
Library exceptions.

Recoverable failures derive from NumCtxError and carry a message plus a
details dict for diagnostics. Combining elements of different contexts is a
programming defect and raises ContextMismatch, an AssertionError.
"""

from typing import Any, Dict, Optional


class NumCtxError(Exception):
    """Base exception for recoverable numctx errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(NumCtxError):
    """Raised when a context is constructed from invalid parameters"""

    def __init__(self, context_type: str, reason: str, **params: Any):
        super().__init__(
            message=f"Invalid parameters for {context_type}: {reason}",
            details={"context_type": context_type, "reason": reason, **params},
        )


class ConversionError(NumCtxError):
    """Raised when a value cannot be represented in the target type"""

    def __init__(self, val: Any, in_type: str, out_type: str):
        self.val = str(val)
        self.in_type = in_type
        self.out_type = out_type
        super().__init__(
            message=f"Unable to convert {self.val} of type {in_type} to type {out_type}.",
            details={"val": self.val, "in_type": in_type, "out_type": out_type},
        )


class DivisionError(NumCtxError):
    """Raised for division by zero, by a non-unit, or by a ball containing zero"""

    def __init__(self, reason: str):
        super().__init__(message=f"Division error: {reason}", details={"reason": reason})


class IndeterminateComparison(NumCtxError):
    """Raised when an ordering of two overlapping balls is requested"""

    def __init__(self, lhs: Any, rhs: Any):
        super().__init__(
            message=f"Cannot decide the ordering of {lhs} and {rhs}",
            details={"lhs": str(lhs), "rhs": str(rhs)},
        )


class ContextMismatch(AssertionError):
    """Raised when elements of different contexts are combined"""

    def __init__(self, lhs: Any, rhs: Any):
        self.lhs = lhs
        self.rhs = rhs
        super().__init__(f"Context mismatch: {lhs} != {rhs}")
