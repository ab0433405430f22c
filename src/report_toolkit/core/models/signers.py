"""
Module: core.models.signers

Purpose:
    Signer entries for the trailing signature block and the first-page
    metadata band.

Key Classes:
    - Signer: concept / name / title triple (immutable)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence


@dataclass(frozen=True)
class Signer:
    """
    One signature box.

    Attributes:
        concept: Label above the signature line (e.g. "Authorized by")
        name: Signer's name, below the line
        title: Signer's role, below the name
    """
    concept: str
    name: str
    title: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Signer":
        return cls(
            concept=str(data.get("concept", "")),
            name=str(data.get("name", "")),
            title=str(data.get("title", "")),
        )


def last_signer(signers: Sequence[Signer]) -> Optional[Signer]:
    """Signer shown in the metadata band: the last one in the list."""
    return signers[-1] if signers else None
