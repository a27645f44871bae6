import logging
from collections.abc import Sequence
from dataclasses import dataclass

from swing_lab.domain.frames import EnergyFrame, KinematicFrame, MatchedSwingRecord, MatchResult, Pairing

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovementGroup[F: (KinematicFrame, EnergyFrame)]:
    key: str
    frames: tuple[F, ...]
    has_movement_id: bool


def group_movements[F: (KinematicFrame, EnergyFrame)](frames: Sequence[F]) -> list[MovementGroup[F]]:
    """Split a frame stream into movements, preserving file order.

    Frames are grouped by ``movement_id`` when the stream carries ids; frames
    missing an id join the movement before them. Without ids a new movement
    starts whenever ``time`` goes backwards. Id-less movements are keyed
    ``swing-1``, ``swing-2`` and so on.
    """
    if not frames:
        return []
    if any(f.movement_id is not None for f in frames):
        return _group_by_id(frames)
    return _group_by_time_reset(frames)


def match(kinematic_frames: list[KinematicFrame], energy_frames: list[EnergyFrame]) -> MatchResult:
    """Pair kinematics and energy-transfer frames into per-swing records.

    Both sides are grouped into movements. When both sides carry movement ids
    and share at least one, the shared ids are paired in energy-side order.
    Otherwise the Nth movement on each side is paired, up to the shorter
    side. An empty side yields single-sided records. Any count mismatch is
    reported in ``warnings``; it is never an error.

    Raises:
        TypeError: when either argument is not a list.
    """
    if not isinstance(kinematic_frames, list) or not isinstance(energy_frames, list):
        msg = (
            "match() expects lists of frames, got "
            f"{type(kinematic_frames).__name__} and {type(energy_frames).__name__}"
        )
        raise TypeError(msg)

    ik_groups = group_movements(kinematic_frames)
    me_groups = group_movements(energy_frames)
    n_ik, n_me = len(ik_groups), len(me_groups)
    logger.debug("Grouped %d kinematics and %d energy movements", n_ik, n_me)

    if not ik_groups or not me_groups:
        return _single_side(ik_groups, me_groups)

    ik_by_id = {g.key: g for g in ik_groups if g.has_movement_id}
    shared = [g for g in me_groups if g.has_movement_id and g.key in ik_by_id]
    if shared:
        records = tuple(
            MatchedSwingRecord(
                movement_id=g.key,
                kinematic_frames=ik_by_id[g.key].frames,
                energy_frames=g.frames,
            )
            for g in shared
        )
        pairing = Pairing.MOVEMENT_ID
    else:
        use_energy_keys = me_groups[0].has_movement_id or not ik_groups[0].has_movement_id
        records = tuple(
            MatchedSwingRecord(
                movement_id=me.key if use_energy_keys else ik.key,
                kinematic_frames=ik.frames,
                energy_frames=me.frames,
            )
            for ik, me in zip(ik_groups, me_groups)
        )
        pairing = Pairing.POSITIONAL

    warnings: list[str] = []
    if len(records) != n_ik or len(records) != n_me:
        warning = (
            f"Swing count mismatch: paired {len(records)} of {max(n_ik, n_me)} movements "
            f"(kinematics={n_ik}, energy={n_me})"
        )
        logger.warning(warning)
        warnings.append(warning)

    return MatchResult(
        records=records,
        pairing=pairing,
        warnings=tuple(warnings),
        kinematic_groups=n_ik,
        energy_groups=n_me,
    )


def _single_side(
    ik_groups: list[MovementGroup[KinematicFrame]],
    me_groups: list[MovementGroup[EnergyFrame]],
) -> MatchResult:
    if ik_groups:
        records = tuple(MatchedSwingRecord(movement_id=g.key, kinematic_frames=g.frames) for g in ik_groups)
        warning = "No energy-transfer frames supplied; movements carry kinematics only"
    elif me_groups:
        records = tuple(MatchedSwingRecord(movement_id=g.key, energy_frames=g.frames) for g in me_groups)
        warning = "No kinematics frames supplied; movements carry energy transfer only"
    else:
        records = ()
        warning = "No motion-capture frames supplied"
    logger.warning(warning)
    return MatchResult(
        records=records,
        pairing=Pairing.SINGLE_SIDE,
        warnings=(warning,),
        kinematic_groups=len(ik_groups),
        energy_groups=len(me_groups),
    )


def _group_by_id[F: (KinematicFrame, EnergyFrame)](frames: Sequence[F]) -> list[MovementGroup[F]]:
    grouped: dict[str, list[F]] = {}
    leading: list[F] = []
    current: str | None = None
    for frame in frames:
        if frame.movement_id is not None:
            current = frame.movement_id
        if current is None:
            leading.append(frame)
            continue
        grouped.setdefault(current, []).append(frame)
    if leading:
        first = next(iter(grouped))
        grouped[first] = leading + grouped[first]
    return [MovementGroup(key=key, frames=tuple(group), has_movement_id=True) for key, group in grouped.items()]


def _group_by_time_reset[F: (KinematicFrame, EnergyFrame)](frames: Sequence[F]) -> list[MovementGroup[F]]:
    groups: list[list[F]] = [[]]
    previous: float | None = None
    for frame in frames:
        if frame.time is not None:
            if previous is not None and frame.time < previous and groups[-1]:
                groups.append([])
            previous = frame.time
        groups[-1].append(frame)
    return [
        MovementGroup(key=f"swing-{n}", frames=tuple(group), has_movement_id=False)
        for n, group in enumerate(groups, start=1)
    ]
