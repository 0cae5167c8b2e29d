from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OperatorContext:
    """Operator on whose behalf a pipeline run happens; passed explicitly."""

    operator_id: Optional[str] = None
    home_country: Optional[str] = None

    def owns(self, operator_id: Optional[str]) -> bool:
        """Templates without an operator are shared; no operator id means all."""
        if self.operator_id is None or operator_id is None:
            return True
        return operator_id == self.operator_id
