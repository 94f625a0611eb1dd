"""
Mail ZIP attachment → Assessment request record

A deterministic, side-effect-free core that turns an opaque attachment
payload into ZIP member metadata and, from the decoded form text inside,
a flat assessment request record ready to be mapped onto a CRM schema.
"""

__version__ = "0.1.0"


class IntakeError(Exception):
    """Base exception for request intake errors."""

    pass
