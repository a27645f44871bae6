"""Declarative header signatures for every supported export format.

Adding a vendor is a data change: append a ``SchemaSignature`` to
``SIGNATURES``. Order matters only as the last tie-break between
equally-scored winners.

All tokens are written in normalized form (see ``normalize_header``).
"""

import re
from dataclasses import dataclass

from swing_lab.domain.detection import Brand, SchemaKind

_SEPARATORS = re.compile(r"[\s_\-.]+")
_PUNCTUATION = re.compile(r"[^\w\s#]")


def normalize_header(header: str) -> str:
    """Lower-case, collapse ``_ - .`` and whitespace to one space, drop other punctuation except ``#``."""
    collapsed = _SEPARATORS.sub(" ", header.strip().lower())
    return _PUNCTUATION.sub("", collapsed).strip()


def token_in_header(token: str, header: str) -> bool:
    """Whether a normalized token occurs in a normalized header.

    Tokens of two characters or fewer ("la", "ev") must match a whole word;
    longer tokens match anywhere in the header.
    """
    if len(token) <= 2:
        return token == header or token in header.split()
    return token in header


@dataclass(frozen=True)
class SchemaSignature:
    name: str
    schema_kind: SchemaKind
    required: tuple[tuple[str, ...], ...]
    optional: tuple[str, ...] = ()
    forbidden: tuple[str, ...] = ()
    brand: Brand | None = None
    filename_tokens: tuple[str, ...] = ()
    columns: tuple[tuple[str, tuple[str, ...]], ...] = ()


# Canonical launch-monitor column aliases, most specific first.
EXIT_VELO_ALIASES = (
    "exit velocity",
    "exitvelocity",
    "exit velo",
    "exitvelo",
    "exit speed",
    "exitspeed",
    "ball speed",
    "ballspeed",
    "velo",
    "ev",
)
LAUNCH_ANGLE_ALIASES = ("la", "launch angle", "launchangle", "vert angle", "vertical angle", "vla", "angle")
DISTANCE_ALIASES = ("dist", "distance", "carry", "total distance", "projected distance", "proj dist")
RESULT_ALIASES = ("res", "result", "play result", "playresult", "outcome", "pitch call")
HIT_TYPE_ALIASES = ("hit type", "hittype", "bb type", "tagged hit type", "type")
SPRAY_ALIASES = ("horiz angle", "spray angle", "sprayangle", "direction", "horizontal angle")
USER_ALIASES = ("user", "batter", "hitter", "player", "name")

LAUNCH_MONITOR_COLUMNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("exit_velo", EXIT_VELO_ALIASES),
    ("launch_angle", LAUNCH_ANGLE_ALIASES),
    ("distance", DISTANCE_ALIASES),
    ("result", RESULT_ALIASES),
    ("hit_type", HIT_TYPE_ALIASES),
    ("spray_angle", SPRAY_ALIASES),
    ("user", USER_ALIASES),
)

# Headers that only ever appear in motion-capture exports.
MOTION_CAPTURE_TOKENS = (
    "kinetic energy",
    "pelvis rot",
    "torso rot",
    "thorax rot",
    "movement id",
    "time from max hand",
)

_LM_OPTIONAL = (
    "dist",
    "distance",
    "result",
    "spray angle",
    "horiz angle",
    "pitch",
    "strike zone",
    "user",
    "batter",
    "hitter",
    "bat side",
)

_MOVEMENT_COLUMNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("movement_id", ("org movement id", "movement id", "movementid", "swing id")),
    ("time_from_max_hand", ("time from max hand",)),
    ("time", ("time", "timestamp", "t")),
)

SIGNATURES: tuple[SchemaSignature, ...] = (
    SchemaSignature(
        name="reboot-ik",
        schema_kind=SchemaKind.KINEMATICS,
        required=(
            (
                "pelvis rot",
                "torso rot",
                "thorax rot",
                "left knee",
                "right knee",
                "left elbow",
                "right elbow",
            ),
        ),
        optional=(
            "movement id",
            "time from max hand",
            "pelvis tilt",
            "pelvis lateral",
            "torso tilt",
            "torso lateral",
            "left shoulder elev",
            "right shoulder elev",
            "left hip flex",
            "right hip flex",
            "lead arm",
            "trail arm",
            "lead hip",
            "trail hip",
        ),
        forbidden=("kinetic energy",),
        filename_tokens=("inverse kinematic", "inversekinematic", "reboot ik", "ik"),
        columns=(
            *_MOVEMENT_COLUMNS,
            ("pelvis_rot", ("pelvis rot", "pelvis rotation")),
            ("torso_rot", ("torso rot", "thorax rot", "torso rotation")),
            ("left_knee", ("left knee",)),
            ("right_knee", ("right knee",)),
            ("left_elbow", ("left elbow",)),
            ("right_elbow", ("right elbow",)),
        ),
    ),
    SchemaSignature(
        name="reboot-me",
        schema_kind=SchemaKind.ENERGY_TRANSFER,
        required=(("kinetic energy", "angular momentum"),),
        optional=(
            "movement id",
            "time from max hand",
            "bat kinetic energy",
            "torso kinetic energy",
            "arms kinetic energy",
            "legs kinetic energy",
            "total kinetic energy",
            "bat momentum",
            "torso momentum",
            "pelvis momentum",
            "power",
            "energy transfer",
        ),
        forbidden=("pelvis rot", "torso rot", "thorax rot"),
        filename_tokens=("momentum energy", "momentumenergy", "reboot me", "me"),
        columns=(
            *_MOVEMENT_COLUMNS,
            ("legs_ke", ("legs kinetic energy",)),
            ("torso_ke", ("torso kinetic energy",)),
            ("arms_ke", ("arms kinetic energy",)),
            ("larm_ke", ("larm kinetic energy", "left arm kinetic energy")),
            ("rarm_ke", ("rarm kinetic energy", "right arm kinetic energy")),
            ("bat_ke", ("bat kinetic energy",)),
            ("total_ke", ("total kinetic energy",)),
        ),
    ),
    SchemaSignature(
        name="hittrax",
        schema_kind=SchemaKind.LAUNCH_MONITOR,
        required=(("velo",), ("la", "launch angle"), ("res", "pts", "horiz angle")),
        optional=(*_LM_OPTIONAL, "pts", "res", "type", "p type", "ab"),
        forbidden=(*MOTION_CAPTURE_TOKENS, "exit velo", "exitvelo", "exit speed", "exitspeed", "ball speed", "ballspeed"),
        brand=Brand.HITTRAX,
        filename_tokens=("hittrax",),
        columns=LAUNCH_MONITOR_COLUMNS,
    ),
    SchemaSignature(
        name="trackman",
        schema_kind=SchemaKind.LAUNCH_MONITOR,
        required=(("exit speed", "exitspeed"), ("angle", "launch angle")),
        optional=(*_LM_OPTIONAL, "play result", "hit spin rate", "direction", "pitch call", "tagged hit type"),
        forbidden=MOTION_CAPTURE_TOKENS,
        brand=Brand.TRACKMAN,
        filename_tokens=("trackman",),
        columns=LAUNCH_MONITOR_COLUMNS,
    ),
    SchemaSignature(
        name="flightscope",
        schema_kind=SchemaKind.LAUNCH_MONITOR,
        required=(("ball speed", "ballspeed"), ("launch angle", "vla", "vert angle")),
        optional=(*_LM_OPTIONAL, "carry", "spin", "launch direction"),
        forbidden=MOTION_CAPTURE_TOKENS,
        brand=Brand.FLIGHTSCOPE,
        filename_tokens=("flightscope", "flight scope"),
        columns=LAUNCH_MONITOR_COLUMNS,
    ),
    SchemaSignature(
        name="rapsodo",
        schema_kind=SchemaKind.LAUNCH_MONITOR,
        required=(("exit velo", "exitvelo"), ("launch angle", "la")),
        optional=(*_LM_OPTIONAL, "spin", "spin axis", "hit id"),
        forbidden=(*MOTION_CAPTURE_TOKENS, "exit velocity", "exitvelocity"),
        brand=Brand.RAPSODO,
        filename_tokens=("rapsodo",),
        columns=LAUNCH_MONITOR_COLUMNS,
    ),
    SchemaSignature(
        name="diamond-kinetics",
        schema_kind=SchemaKind.LAUNCH_MONITOR,
        required=(("exit velocity", "exitvelocity"), ("launch angle", "la")),
        optional=(*_LM_OPTIONAL, "bat speed", "hand speed", "attack angle", "trigger to impact"),
        forbidden=MOTION_CAPTURE_TOKENS,
        brand=Brand.DIAMOND_KINETICS,
        filename_tokens=("diamond kinetics", "diamondkinetics", "dk"),
        columns=LAUNCH_MONITOR_COLUMNS,
    ),
    SchemaSignature(
        name="generic",
        schema_kind=SchemaKind.LAUNCH_MONITOR,
        required=(EXIT_VELO_ALIASES, LAUNCH_ANGLE_ALIASES),
        optional=_LM_OPTIONAL,
        forbidden=MOTION_CAPTURE_TOKENS,
        brand=Brand.GENERIC,
        columns=LAUNCH_MONITOR_COLUMNS,
    ),
)

GENERIC_SIGNATURE = "generic"
