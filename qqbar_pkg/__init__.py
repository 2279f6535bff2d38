"""qqbar package: exact real and complex algebraic numbers built on SymPy polynomials."""

__all__ = [
    "config",
    "polynomials",
    "isolation",
    "real",
    "complex",
    "arithmetic",
    "parser",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "real_roots",
    "complex_roots",
    "count_roots_in_box",
]
