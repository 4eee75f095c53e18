"""
Verified request principal.

Both credential schemes resolve to the same Principal shape so role and
ownership checks never depend on how the caller authenticated.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class CredentialScheme(str, enum.Enum):
    FEDERATED = "federated"  # Bearer ID token verified by the identity provider
    SESSION = "session"      # Locally issued JWT carried in the session cookie


@dataclass(frozen=True)
class Principal:
    email: Optional[str]
    scheme: CredentialScheme
    uid: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict, compare=False)
