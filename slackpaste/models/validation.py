"""
ValidationResult — outcome of settings or parse-output validation.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from slackpaste.models.settings import SettingsError


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    data: Optional[dict] = None

    def raise_on_error(self) -> None:
        """Raise SettingsError carrying every error message when invalid."""
        if not self.valid:
            raise SettingsError("; ".join(self.errors) or "invalid settings")
