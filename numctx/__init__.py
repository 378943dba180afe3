"""numctx - generic algebraic computation with explicit contexts.

Main namespace package:
- numctx.core: configuration, logging and exceptions
- numctx.math: contexts, elements, ball arithmetic and serialization
"""

__version__ = "0.1.0"

__all__ = []
