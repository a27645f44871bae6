from dataclasses import dataclass, field
from enum import StrEnum


class SchemaKind(StrEnum):
    LAUNCH_MONITOR = "launch-monitor"
    KINEMATICS = "kinematics"
    ENERGY_TRANSFER = "energy-transfer"
    UNKNOWN = "unknown"


class Brand(StrEnum):
    HITTRAX = "hittrax"
    TRACKMAN = "trackman"
    RAPSODO = "rapsodo"
    FLIGHTSCOPE = "flightscope"
    DIAMOND_KINETICS = "diamond-kinetics"
    GENERIC = "generic"


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class DetectionResult:
    schema_kind: SchemaKind
    confidence: Confidence
    brand: Brand | None = None
    column_map: dict[str, str] = field(default_factory=dict)
    debug_headers: tuple[str, ...] = ()
    matched_signature: str | None = None

    @property
    def is_known(self) -> bool:
        return self.schema_kind is not SchemaKind.UNKNOWN
