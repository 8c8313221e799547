"""SysResult and SysError - the outcome of every System operation.

System mutators never raise for business-rule violations. They return a
SysResult, and entity-level exceptions are translated into one of the
four SysError kinds before crossing the System boundary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SysError(str, Enum):
    """Error kinds surfaced by the System aggregate"""

    ALREADY_EXISTS = "already_exists"
    DOESNT_EXIST = "doesnt_exist"
    CANNOT_UPDATE = "cannot_update"
    CANNOT_DELETE = "cannot_delete"


@dataclass(frozen=True)
class SysResult:
    """Success/failure of a System call, with an optional payload"""

    ok: bool
    error: Optional[SysError] = None
    value: Any = None

    @classmethod
    def success(cls, value: Any = None) -> "SysResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: SysError) -> "SysResult":
        return cls(ok=False, error=error)

    def unwrap(self) -> Any:
        """Return the payload, raising if the call failed"""
        if not self.ok:
            raise ValueError(f"Called unwrap on a failed result: {self.error.value}")
        return self.value
