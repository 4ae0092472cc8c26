"""
tpar-lint: Taxable Payments Annual Report file validator.

A library and CLI tool for validating ATO TPAR electronic lodgement files
(fixed-width 996-character records, ATO format FPAIVV03.0).
Detects structural, ordering and field-level defects before lodgement.

Usage:
    from tpar_lint.core.parser import parse_file
    from tpar_lint.core.rules import validate

    report = validate(parse_file("TPAR2025.txt"))
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
