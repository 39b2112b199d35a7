from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class VariantAssignment:
    """Outcome of bucketing one visitor into one experiment. Recomputed, never stored."""

    experiment_id: str
    visitor_id: str
    variant: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
