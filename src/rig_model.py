"""
Data model of a parsed truck definition.

Holds:
- Document (title, format flags, root module, user modules)
- Module (one ordered list per element kind)
- Node references with dual numeric/named state
- Defaults snapshots (node, beam, inertia, managed materials, minimass)
- Element records for every section of the format

Defaults snapshots are frozen dataclasses. A directive that changes defaults
publishes a new snapshot derived with `dataclasses.replace`; elements keep the
snapshot that was current when they were defined.

Usage:
    doc = RigParser().parse_file("my.truck")
    print(doc.name, len(doc.root_module.nodes))
    import json
    print(json.dumps(doc.to_dict(), indent=2))
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum, IntEnum, IntFlag
from typing import Any, Union

from .config import (
    ROOT_MODULE_NAME,
    DEFAULT_SPRING,
    DEFAULT_DAMP,
    BEAM_DEFORM,
    BEAM_BREAK,
    DEFAULT_BEAM_DIAMETER,
    BEAM_SKELETON_DIAMETER,
    DEFAULT_MINIMASS,
    DEFAULT_SKELETON_VISIBILITY_RANGE,
)


# --------------------------
# Basic types
# --------------------------

@dataclass(frozen=True)
class Vec3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class RefFlags(IntFlag):
    NONE = 0
    IMPORT_STATE_IS_VALID = 1 << 0                # valid as legacy numeric id
    IMPORT_STATE_MUST_CHECK_NAMED_FIRST = 1 << 1  # a named node existed when the ref was read
    REGULAR_STATE_IS_VALID = 1 << 2               # valid as named id
    REGULAR_STATE_IS_NAMED = 1 << 3


@dataclass
class NodeRef:
    """
    Reference to a node, as written in the file.

    Until the document's addressing mode is known, a reference keeps both a
    numeric interpretation (`num`) and a named one (`text`). The sequential
    importer picks one of them at the end of parsing.

    Attributes:
        text: Literal argument text
        num: Numeric value (absolute value of the parsed integer)
        flags: RefFlags validity state
        line_number: Line the reference was read from
    """
    text: str = ""
    num: int = 0
    flags: RefFlags = RefFlags.NONE
    line_number: int = 0

    @property
    def is_numeric_valid(self) -> bool:
        return bool(self.flags & RefFlags.IMPORT_STATE_IS_VALID)

    @property
    def is_named_valid(self) -> bool:
        return bool(self.flags & RefFlags.REGULAR_STATE_IS_VALID)

    @property
    def must_check_named_first(self) -> bool:
        return bool(self.flags & RefFlags.IMPORT_STATE_MUST_CHECK_NAMED_FIRST)

    def is_valid_any_state(self) -> bool:
        return self.is_numeric_valid or self.is_named_valid

    def is_empty(self) -> bool:
        """Null references ('9999' rigidity node, '-1' optional node) carry no text."""
        return self.text == "" and not self.is_valid_any_state()

    def set_numeric(self) -> None:
        self.flags = RefFlags.IMPORT_STATE_IS_VALID

    def set_named(self) -> None:
        self.flags = RefFlags.REGULAR_STATE_IS_VALID | RefFlags.REGULAR_STATE_IS_NAMED

    def __str__(self) -> str:
        if self.is_named_valid and not self.is_numeric_valid:
            return self.text
        if self.is_numeric_valid and not self.is_named_valid:
            return str(self.num)
        return self.text


@dataclass
class NodeRange:
    start: NodeRef = field(default_factory=NodeRef)
    end: NodeRef = field(default_factory=NodeRef)


@dataclass
class NodeId:
    """Identifier of a declared node: a number ('nodes') or a name ('nodes2')."""
    num: int | None = None
    name: str | None = None

    @property
    def is_named(self) -> bool:
        return self.name is not None

    def __str__(self) -> str:
        return self.name if self.name is not None else str(self.num)


# --------------------------
# Enumerations and option flags
# --------------------------

class NodeOption(IntFlag):
    NONE = 0
    LOAD_WEIGHT = 1 << 0           # l
    MOUSE_GRAB = 1 << 1            # n
    NO_MOUSE_GRAB = 1 << 2         # m
    NO_SPARKS = 1 << 3             # f
    EXHAUST_POINT = 1 << 4         # x
    EXHAUST_DIRECTION = 1 << 5     # y
    NO_GROUND_CONTACT = 1 << 6     # c
    HOOK_POINT = 1 << 7            # h
    TERRAIN_EDIT_POINT = 1 << 8    # e
    EXTRA_BUOYANCY = 1 << 9        # b
    NO_PARTICLES = 1 << 10         # p
    LOG = 1 << 11                  # L


class BeamOption(IntFlag):
    NONE = 0
    INVISIBLE = 1 << 0  # i
    ROPE = 1 << 1       # r
    SUPPORT = 1 << 2    # s


class CabOption(IntFlag):
    NONE = 0
    CONTACT = 1 << 0
    BUOYANT = 1 << 1
    TOUGHER_10X = 1 << 2
    INVULNERABLE = 1 << 3


class ShockOption(IntFlag):
    NONE = 0
    INVISIBLE = 1 << 0         # i
    METRIC = 1 << 1            # m
    ABSOLUTE_METRIC = 1 << 2   # M
    SOFT_BUMP_BOUNDS = 1 << 3  # s
    ACTIVE_RIGHT = 1 << 4      # r R
    ACTIVE_LEFT = 1 << 5       # l L


class TriggerOption(IntFlag):
    NONE = 0
    INVISIBLE = 1 << 0             # i
    COMMAND_STYLE = 1 << 1         # c
    START_OFF = 1 << 2             # x
    BLOCK_KEYS = 1 << 3            # b
    BLOCK_TRIGGERS = 1 << 4        # B
    INV_BLOCK_TRIGGERS = 1 << 5    # A
    SWITCH_CMD_NUM = 1 << 6        # s
    UNLOCK_HOOKGROUPS_KEY = 1 << 7  # h
    LOCK_HOOKGROUPS_KEY = 1 << 8   # H
    CONTINUOUS = 1 << 9            # t
    ENGINE_TRIGGER = 1 << 10       # E


class WheelBraking(IntEnum):
    NONE = 0
    FOOT_HAND = 1
    FOOT_HAND_SKID_LEFT = 2
    FOOT_HAND_SKID_RIGHT = 3
    FOOT_ONLY = 4


class WheelPropulsion(IntEnum):
    NONE = 0
    FORWARD = 1
    BACKWARD = 2


class WheelSide(Enum):
    LEFT = "l"
    RIGHT = "r"


class FlareType(Enum):
    HEADLIGHT = "f"
    BRAKE_LIGHT = "b"
    BLINKER_LEFT = "l"
    BLINKER_RIGHT = "r"
    REVERSE_LIGHT = "R"
    USER = "u"
    DASHBOARD = "d"


class MinimassOption(Enum):
    SKIP_LOADED = "l"
    DUMMY = "n"


class DifferentialType(Enum):
    OPEN = "o"
    LOCKED = "l"
    SPLIT = "s"
    VISCOUS = "v"


class CameraMode(IntEnum):
    """Visibility of props, flexbodies and sound sources per camera."""
    ALWAYS = -2
    EXTERNAL = -1
    CINECAM = 1


class ExtCameraMode(Enum):
    CLASSIC = "classic"
    CINECAM = "cinecam"
    NODE = "node"


class ManagedMaterialType(Enum):
    MESH_STANDARD = "mesh_standard"
    MESH_TRANSPARENT = "mesh_transparent"
    FLEXMESH_STANDARD = "flexmesh_standard"
    FLEXMESH_TRANSPARENT = "flexmesh_transparent"


class PropSpecial(Enum):
    NONE = "none"
    MIRROR_LEFT = "mirror_left"
    MIRROR_RIGHT = "mirror_right"
    DASHBOARD_LEFT = "dashboard_left"
    DASHBOARD_RIGHT = "dashboard_right"
    AERO_PROP_SPIN = "aero_prop_spin"
    AERO_PROP_BLADE = "aero_prop_blade"
    DRIVER_SEAT = "driver_seat"
    DRIVER_SEAT_2 = "driver_seat_2"
    BEACON = "beacon"
    REDBEACON = "redbeacon"
    LIGHTBAR = "lightbar"


class SlideNodeConstraint(IntFlag):
    NONE = 0
    ATTACH_ALL = 1 << 0
    ATTACH_FOREIGN = 1 << 1
    ATTACH_SELF = 1 << 2
    ATTACH_NONE = 1 << 3


class AnimationMode(IntFlag):
    NONE = 0
    ROTATION_X = 1 << 0
    ROTATION_Y = 1 << 1
    ROTATION_Z = 1 << 2
    OFFSET_X = 1 << 3
    OFFSET_Y = 1 << 4
    OFFSET_Z = 1 << 5
    AUTO_ANIMATE = 1 << 6
    NO_FLIP = 1 << 7
    BOUNCE = 1 << 8
    EVENT_LOCK = 1 << 9


class AnimationSource(IntFlag):
    NONE = 0
    AIRSPEED = 1 << 0
    VERTICAL_VELOCITY = 1 << 1
    ALTIMETER_100K = 1 << 2
    ALTIMETER_10K = 1 << 3
    ALTIMETER_1K = 1 << 4
    ANGLE_OF_ATTACK = 1 << 5
    FLAP = 1 << 6
    AIR_BRAKE = 1 << 7
    ROLL = 1 << 8
    PITCH = 1 << 9
    BRAKES = 1 << 10
    ACCEL = 1 << 11
    CLUTCH = 1 << 12
    SPEEDO = 1 << 13
    TACHO = 1 << 14
    TURBO = 1 << 15
    PARKING = 1 << 16
    SHIFT_LEFT_RIGHT = 1 << 17
    SHIFT_BACK_FORTH = 1 << 18
    SEQUENTIAL_SHIFT = 1 << 19
    SHIFTERLIN = 1 << 20
    TORQUE = 1 << 21
    HEADING = 1 << 22
    DIFFLOCK = 1 << 23
    BOAT_RUDDER = 1 << 24
    BOAT_THROTTLE = 1 << 25
    STEERING_WHEEL = 1 << 26
    AILERON = 1 << 27
    ELEVATOR = 1 << 28
    AIR_RUDDER = 1 << 29
    PERMANENT = 1 << 30
    EVENT = 1 << 31


class MotorSourceKind(Enum):
    AERO_THROTTLE = "throttle"
    AERO_RPM = "rpm"
    AERO_TORQUE = "aerotorq"
    AERO_PITCH = "aeropit"
    AERO_STATUS = "aerostatus"


class AnimatorOption(IntFlag):
    NONE = 0
    VISIBLE = 1 << 0
    INVISIBLE = 1 << 1
    AIRSPEED = 1 << 2
    VERTICAL_VELOCITY = 1 << 3
    ALTIMETER_100K = 1 << 4
    ALTIMETER_10K = 1 << 5
    ALTIMETER_1K = 1 << 6
    ANGLE_OF_ATTACK = 1 << 7
    FLAP = 1 << 8
    AIR_BRAKE = 1 << 9
    ROLL = 1 << 10
    PITCH = 1 << 11
    BRAKES = 1 << 12
    ACCEL = 1 << 13
    CLUTCH = 1 << 14
    SPEEDO = 1 << 15
    TACHO = 1 << 16
    TURBO = 1 << 17
    PARKING = 1 << 18
    SHIFT_LEFT_RIGHT = 1 << 19
    SHIFT_BACK_FORTH = 1 << 20
    SEQUENTIAL_SHIFT = 1 << 21
    GEAR_SELECT = 1 << 22
    TORQUE = 1 << 23
    DIFFLOCK = 1 << 24
    BOAT_RUDDER = 1 << 25
    BOAT_THROTTLE = 1 << 26
    SHORT_LIMIT = 1 << 27
    LONG_LIMIT = 1 << 28


class AeroAnimatorOption(IntFlag):
    NONE = 0
    THROTTLE = 1 << 0
    RPM = 1 << 1
    TORQUE = 1 << 2
    PITCH = 1 << 3
    STATUS = 1 << 4


WING_CONTROL_LEGAL_FLAGS = "abcdefghijnrSTUV"


# --------------------------
# Defaults snapshots
# --------------------------

@dataclass(frozen=True)
class NodeDefaults:
    load_weight: float = -1.0
    friction: float = 1.0
    volume: float = 1.0
    surface: float = 1.0
    options: NodeOption = NodeOption.NONE


@dataclass(frozen=True)
class BeamDefaultsScale:
    springiness: float = 1.0
    damping_constant: float = 1.0
    deformation_threshold_constant: float = 1.0
    breaking_threshold_constant: float = 1.0


@dataclass(frozen=True)
class BeamDefaults:
    """
    Physics defaults applied to beam-like elements.

    Attributes:
        springiness: Spring constant
        damping_constant: Damping constant
        deformation_threshold: Deformation threshold
        breaking_threshold: Breaking threshold
        visual_beam_diameter: Rendered diameter in meters
        beam_material_name: Rendering material
        plastic_deform_coef: Plastic deformation coefficient
        enable_advanced_deformation: State of 'enable_advanced_deformation' when published
        is_user_defined: Published by 'set_beam_defaults' rather than built-in
        is_plastic_deform_coef_user_defined: Plastic coefficient given explicitly
        scale: Multipliers set by 'set_beam_defaults_scale'
    """
    springiness: float = DEFAULT_SPRING
    damping_constant: float = DEFAULT_DAMP
    deformation_threshold: float = BEAM_DEFORM
    breaking_threshold: float = BEAM_BREAK
    visual_beam_diameter: float = DEFAULT_BEAM_DIAMETER
    beam_material_name: str = "tracks/beam"
    plastic_deform_coef: float = 0.0
    enable_advanced_deformation: bool = False
    is_user_defined: bool = False
    is_plastic_deform_coef_user_defined: bool = False
    scale: BeamDefaultsScale = field(default_factory=BeamDefaultsScale)


@dataclass(frozen=True)
class Inertia:
    start_delay_factor: float = 0.0
    stop_delay_factor: float = 0.0
    start_function: str = ""
    stop_function: str = ""


@dataclass(frozen=True)
class ManagedMaterialsOptions:
    double_sided: bool = False


@dataclass(frozen=True)
class DefaultMinimass:
    min_mass_kg: float = DEFAULT_MINIMASS


BUILTIN_NODE_DEFAULTS = NodeDefaults()
BUILTIN_BEAM_DEFAULTS = BeamDefaults()
BUILTIN_INERTIA = Inertia()
BUILTIN_MINIMASS = DefaultMinimass()


# --------------------------
# Elements
# --------------------------

@dataclass
class Node:
    """
    A node declared in 'nodes' (numbered) or 'nodes2' (named).

    Attributes:
        id: Number or name of the node
        position: Position in meters
        options: NodeOption bitmask
        load_weight_override: Load weight given with option 'l', None if absent
        node_defaults: NodeDefaults snapshot current at definition
        beam_defaults: BeamDefaults snapshot current at definition
        default_minimass: Snapshot of 'set_default_minimass', None if never set
        detacher_group: Detacher group active at definition
    """
    id: NodeId = field(default_factory=NodeId)
    position: Vec3 = field(default_factory=Vec3)
    options: NodeOption = NodeOption.NONE
    load_weight_override: float | None = None
    node_defaults: NodeDefaults = BUILTIN_NODE_DEFAULTS
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    default_minimass: DefaultMinimass | None = None
    detacher_group: int = 0


@dataclass
class Beam:
    """
    A beam connecting two nodes.

    Attributes:
        nodes: The two connected nodes
        options: BeamOption bitmask
        extension_break_limit: Support beam break limit (option 's'), None if absent
        defaults: BeamDefaults snapshot current at definition
        detacher_group: Detacher group active at definition
    """
    nodes: list[NodeRef] = field(default_factory=list)
    options: BeamOption = BeamOption.NONE
    extension_break_limit: float | None = None
    defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    detacher_group: int = 0


@dataclass
class BaseWheel:
    """
    Fields shared by all wheel kinds.

    `generated_node_ids` is filled by the sequential importer for legacy
    documents: ids reserved for the nodes the wheel generates.
    """
    num_rays: int = 0
    nodes: list[NodeRef] = field(default_factory=list)
    rigidity_node: NodeRef = field(default_factory=NodeRef)
    braking: WheelBraking = WheelBraking.NONE
    propulsion: WheelPropulsion = WheelPropulsion.NONE
    reference_arm_node: NodeRef = field(default_factory=NodeRef)
    mass: float = 0.0
    node_defaults: NodeDefaults = BUILTIN_NODE_DEFAULTS
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    generated_node_ids: list[int] = field(default_factory=list)


@dataclass
class Wheel(BaseWheel):
    radius: float = 0.0
    width: float = 0.0
    springiness: float = 0.0
    damping: float = 0.0
    face_material_name: str = ""
    band_material_name: str = ""


@dataclass
class Wheel2(BaseWheel):
    rim_radius: float = 0.0
    tyre_radius: float = 0.0
    width: float = 0.0
    rim_springiness: float = 0.0
    rim_damping: float = 0.0
    tyre_springiness: float = 0.0
    tyre_damping: float = 0.0
    face_material_name: str = ""
    band_material_name: str = ""


@dataclass
class MeshWheel(BaseWheel):
    is_meshwheel2: bool = False
    tyre_radius: float = 0.0
    rim_radius: float = 0.0
    width: float = 0.0
    spring: float = 0.0
    damping: float = 0.0
    side: WheelSide = WheelSide.LEFT
    mesh_name: str = ""
    material_name: str = ""


@dataclass
class FlexBodyWheel(BaseWheel):
    tyre_radius: float = 0.0
    rim_radius: float = 0.0
    width: float = 0.0
    tyre_springiness: float = 0.0
    tyre_damping: float = 0.0
    rim_springiness: float = 0.0
    rim_damping: float = 0.0
    side: WheelSide = WheelSide.LEFT
    rim_mesh_name: str = ""
    tyre_mesh_name: str = ""


@dataclass
class WheelDetacher:
    wheel_id: int = 0
    detacher_group: int = 0


@dataclass
class Hook:
    node: NodeRef = field(default_factory=NodeRef)
    option_hook_range: float = 0.4
    option_speed_coef: float = 1.0
    option_max_force: float = 10000000.0
    option_hookgroup: int = -1
    option_lockgroup: int = -1
    option_timer: float = 5.0
    option_min_range_meters: float = 0.0
    flag_self_lock: bool = False
    flag_auto_lock: bool = False
    flag_no_disable: bool = False
    flag_no_rope: bool = False
    flag_visible: bool = False


@dataclass
class Shock:
    nodes: list[NodeRef] = field(default_factory=list)
    spring_rate: float = 0.0
    damping: float = 0.0
    short_bound: float = 0.0
    long_bound: float = 0.0
    precompression: float = 1.0
    options: ShockOption = ShockOption.NONE
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    detacher_group: int = 0


@dataclass
class Shock2:
    nodes: list[NodeRef] = field(default_factory=list)
    spring_in: float = 0.0
    damp_in: float = 0.0
    progress_factor_spring_in: float = 0.0
    progress_factor_damp_in: float = 0.0
    spring_out: float = 0.0
    damp_out: float = 0.0
    progress_factor_spring_out: float = 0.0
    progress_factor_damp_out: float = 0.0
    short_bound: float = 0.0
    long_bound: float = 0.0
    precompression: float = 0.0
    options: ShockOption = ShockOption.NONE
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    detacher_group: int = 0


@dataclass
class Shock3:
    nodes: list[NodeRef] = field(default_factory=list)
    spring_in: float = 0.0
    damp_in: float = 0.0
    damp_in_slow: float = 0.0
    split_vel_in: float = 0.0
    damp_in_fast: float = 0.0
    spring_out: float = 0.0
    damp_out: float = 0.0
    damp_out_slow: float = 0.0
    split_vel_out: float = 0.0
    damp_out_fast: float = 0.0
    short_bound: float = 0.0
    long_bound: float = 0.0
    precompression: float = 0.0
    options: ShockOption = ShockOption.NONE
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    detacher_group: int = 0


@dataclass
class Hydro:
    nodes: list[NodeRef] = field(default_factory=list)
    lengthening_factor: float = 0.0
    options: str = ""
    inertia: Inertia = BUILTIN_INERTIA
    inertia_defaults: Inertia = BUILTIN_INERTIA
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    detacher_group: int = 0


@dataclass
class Command2:
    """
    A command beam from 'commands' (format_version 1) or 'commands2' (2).

    In format 1 the lengthen rate equals the shorten rate.
    """
    format_version: int = 2
    nodes: list[NodeRef] = field(default_factory=list)
    shorten_rate: float = 0.0
    lengthen_rate: float = 0.0
    max_contraction: float = 0.0
    max_extension: float = 0.0
    contract_key: int = 0
    extend_key: int = 0
    description: str = ""
    inertia: Inertia = BUILTIN_INERTIA
    affect_engine: float = 1.0
    needs_engine: bool = True
    plays_sound: bool = True
    option_i_invisible: bool = False
    option_r_rope: bool = False
    option_f_not_faster: bool = False
    option_c_auto_center: bool = False
    option_p_1press: bool = False
    option_o_1press_center: bool = False
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    inertia_defaults: Inertia = BUILTIN_INERTIA
    detacher_group: int = 0


@dataclass
class Rotator:
    axis_nodes: list[NodeRef] = field(default_factory=list)
    base_plate_nodes: list[NodeRef] = field(default_factory=list)
    rotating_plate_nodes: list[NodeRef] = field(default_factory=list)
    rate: float = 0.0
    spin_left_key: int = 0
    spin_right_key: int = 0
    inertia: Inertia = BUILTIN_INERTIA
    inertia_defaults: Inertia = BUILTIN_INERTIA
    engine_coupling: float = 1.0
    needs_engine: bool = False


@dataclass
class Rotator2(Rotator):
    rotating_force: float = 10000000.0
    tolerance: float = 0.0
    description: str = ""


@dataclass
class CommandKeyTrigger:
    contraction_trigger_key: int = 0
    extension_trigger_key: int = 0


@dataclass
class HookToggleTrigger:
    contraction_trigger_hookgroup_id: int = -1
    extension_trigger_hookgroup_id: int = -1


@dataclass
class EngineTrigger:
    function: int = 0
    motor_index: int = 0


TriggerAction = Union[CommandKeyTrigger, HookToggleTrigger, EngineTrigger]


@dataclass
class Trigger:
    nodes: list[NodeRef] = field(default_factory=list)
    contraction_trigger_limit: float = 0.0
    expansion_trigger_limit: float = 0.0
    options: TriggerOption = TriggerOption.NONE
    boundary_timer: float = 1.0
    action: TriggerAction = field(default_factory=CommandKeyTrigger)
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    detacher_group: int = 0

    def is_hook_toggle_trigger(self) -> bool:
        return bool(self.options & (TriggerOption.UNLOCK_HOOKGROUPS_KEY | TriggerOption.LOCK_HOOKGROUPS_KEY))

    def is_engine_trigger(self) -> bool:
        return bool(self.options & TriggerOption.ENGINE_TRIGGER)


@dataclass
class Tie:
    root_node: NodeRef = field(default_factory=NodeRef)
    max_reach_length: float = 0.0
    auto_shorten_rate: float = 0.0
    min_length: float = 0.0
    max_length: float = 0.0
    is_invisible: bool = False
    disable_self_lock: bool = False
    max_stress: float = 100000.0
    group: int = -1
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    detacher_group: int = 0


@dataclass
class Rope:
    root_node: NodeRef = field(default_factory=NodeRef)
    end_node: NodeRef = field(default_factory=NodeRef)
    invisible: bool = False
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    detacher_group: int = 0


@dataclass
class Ropable:
    node: NodeRef = field(default_factory=NodeRef)
    group: int = -1
    has_multilock: bool = False


@dataclass
class Cinecam:
    position: Vec3 = field(default_factory=Vec3)
    nodes: list[NodeRef] = field(default_factory=list)
    spring: float = 8000.0
    damping: float = 800.0
    node_mass: float = 20.0
    node_defaults: NodeDefaults = BUILTIN_NODE_DEFAULTS
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    generated_node_ids: list[int] = field(default_factory=list)


@dataclass
class Camera:
    center_node: NodeRef = field(default_factory=NodeRef)
    back_node: NodeRef = field(default_factory=NodeRef)
    left_node: NodeRef = field(default_factory=NodeRef)


@dataclass
class CameraRail:
    nodes: list[NodeRef] = field(default_factory=list)


@dataclass
class CameraSettings:
    mode: CameraMode = CameraMode.ALWAYS
    cinecam_index: int = 0


@dataclass
class ExtCamera:
    mode: ExtCameraMode = ExtCameraMode.CLASSIC
    node: NodeRef = field(default_factory=NodeRef)


@dataclass
class Texcoord:
    node: NodeRef = field(default_factory=NodeRef)
    u: float = 0.0
    v: float = 0.0


@dataclass
class Cab:
    nodes: list[NodeRef] = field(default_factory=list)
    options: CabOption = CabOption.NONE


@dataclass
class Submesh:
    backmesh: bool = False
    texcoords: list[Texcoord] = field(default_factory=list)
    cab_triangles: list[Cab] = field(default_factory=list)


@dataclass
class Flexbody:
    reference_node: NodeRef = field(default_factory=NodeRef)
    x_axis_node: NodeRef = field(default_factory=NodeRef)
    y_axis_node: NodeRef = field(default_factory=NodeRef)
    offset: Vec3 = field(default_factory=Vec3)
    rotation: Vec3 = field(default_factory=Vec3)
    mesh_name: str = ""
    camera_settings: CameraSettings = field(default_factory=CameraSettings)
    node_list_to_import: list[NodeRange] = field(default_factory=list)


@dataclass
class MotorSource:
    source: MotorSourceKind = MotorSourceKind.AERO_THROTTLE
    motor: int = 0


@dataclass
class Animation:
    ratio: float = 0.0
    lower_limit: float = -1.0
    upper_limit: float = -1.0
    mode: AnimationMode = AnimationMode.NONE
    source: AnimationSource = AnimationSource.NONE
    motor_sources: list[MotorSource] = field(default_factory=list)
    event: str = ""


@dataclass
class BeaconProp:
    flare_material_name: str = ""
    color: tuple[float, float, float] = (1.0, 0.5, 0.0)


@dataclass
class DashboardProp:
    mesh_name: str = ""
    offset: Vec3 = field(default_factory=Vec3)
    offset_is_set: bool = False
    rotation_angle: float = 160.0


@dataclass
class Prop:
    reference_node: NodeRef = field(default_factory=NodeRef)
    x_axis_node: NodeRef = field(default_factory=NodeRef)
    y_axis_node: NodeRef = field(default_factory=NodeRef)
    offset: Vec3 = field(default_factory=Vec3)
    rotation: Vec3 = field(default_factory=Vec3)
    mesh_name: str = ""
    special: PropSpecial = PropSpecial.NONE
    beacon: BeaconProp | None = None
    dashboard: DashboardProp | None = None
    camera_settings: CameraSettings = field(default_factory=CameraSettings)
    animations: list[Animation] = field(default_factory=list)


@dataclass
class AeroAnimator:
    flags: AeroAnimatorOption = AeroAnimatorOption.NONE
    engine_idx: int = 0


@dataclass
class Animator:
    nodes: list[NodeRef] = field(default_factory=list)
    lengthening_factor: float = 0.0
    flags: AnimatorOption = AnimatorOption.NONE
    short_limit: float = 0.0
    long_limit: float = 0.0
    aero_animator: AeroAnimator = field(default_factory=AeroAnimator)
    inertia_defaults: Inertia = BUILTIN_INERTIA
    beam_defaults: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    detacher_group: int = 0


@dataclass
class Airbrake:
    reference_node: NodeRef = field(default_factory=NodeRef)
    x_axis_node: NodeRef = field(default_factory=NodeRef)
    y_axis_node: NodeRef = field(default_factory=NodeRef)
    additional_node: NodeRef = field(default_factory=NodeRef)
    offset: Vec3 = field(default_factory=Vec3)
    width: float = 0.0
    height: float = 0.0
    max_inclination_angle: float = 0.0
    texcoord_x1: float = 0.0
    texcoord_y1: float = 0.0
    texcoord_x2: float = 0.0
    texcoord_y2: float = 0.0


@dataclass
class Wing:
    nodes: list[NodeRef] = field(default_factory=list)
    tex_coords: list[float] = field(default_factory=list)
    control_surface: str = "n"
    chord_point: float = -1.0
    min_deflection: float = -1.0
    max_deflection: float = -1.0
    airfoil: str = ""
    efficacy_coef: float = 1.0


@dataclass
class Fusedrag:
    autocalc: bool = False
    front_node: NodeRef = field(default_factory=NodeRef)
    rear_node: NodeRef = field(default_factory=NodeRef)
    approximate_width: float = 0.0
    area_coefficient: float = 1.0
    airfoil_name: str = "NACA0009.afl"


@dataclass
class Turbojet:
    front_node: NodeRef = field(default_factory=NodeRef)
    back_node: NodeRef = field(default_factory=NodeRef)
    side_node: NodeRef = field(default_factory=NodeRef)
    is_reversable: int = 0
    dry_thrust: float = 0.0
    wet_thrust: float = 0.0
    front_diameter: float = 0.0
    back_diameter: float = 0.0
    nozzle_length: float = 0.0


@dataclass
class Turboprop2:
    reference_node: NodeRef = field(default_factory=NodeRef)
    axis_node: NodeRef = field(default_factory=NodeRef)
    blade_tip_nodes: list[NodeRef] = field(default_factory=list)
    couple_node: NodeRef = field(default_factory=NodeRef)
    turbine_power_kw: float = 0.0
    airfoil: str = ""


@dataclass
class Pistonprop:
    reference_node: NodeRef = field(default_factory=NodeRef)
    axis_node: NodeRef = field(default_factory=NodeRef)
    blade_tip_nodes: list[NodeRef] = field(default_factory=list)
    couple_node: NodeRef = field(default_factory=NodeRef)
    turbine_power_kw: float = 0.0
    pitch: float = 0.0
    airfoil: str = ""


@dataclass
class Screwprop:
    prop_node: NodeRef = field(default_factory=NodeRef)
    back_node: NodeRef = field(default_factory=NodeRef)
    top_node: NodeRef = field(default_factory=NodeRef)
    power: float = 0.0


@dataclass
class Engine:
    shift_down_rpm: float = 0.0
    shift_up_rpm: float = 0.0
    torque: float = 0.0
    global_gear_ratio: float = 0.0
    reverse_gear_ratio: float = 0.0
    neutral_gear_ratio: float = 0.0
    gear_ratios: list[float] = field(default_factory=list)


@dataclass
class Engoption:
    inertia: float = 10.0
    type: str = "t"
    clutch_force: float = -1.0
    shift_time: float = -1.0
    clutch_time: float = -1.0
    post_shift_time: float = -1.0
    stall_rpm: float = -1.0
    idle_rpm: float = -1.0
    max_idle_mixture: float = -1.0
    min_idle_mixture: float = -1.0
    braking_torque: float = -1.0


@dataclass
class Engturbo:
    version: int = 1
    tinertia_factor: float = 1.0
    nturbos: int = 1
    params: list[float] = field(default_factory=list)


@dataclass
class TorqueCurveSample:
    power: float = 0.0
    torque_percent: float = 0.0


@dataclass
class TorqueCurve:
    predefined_func_name: str = ""
    samples: list[TorqueCurveSample] = field(default_factory=list)


@dataclass
class Axle:
    wheels: list[list[NodeRef]] = field(default_factory=lambda: [[NodeRef(), NodeRef()], [NodeRef(), NodeRef()]])
    options: list[DifferentialType] = field(default_factory=list)


@dataclass
class InterAxle:
    a1: int = 0
    a2: int = 0
    options: list[DifferentialType] = field(default_factory=list)


@dataclass
class TransferCase:
    a1: int = 0
    a2: int = -1
    has_2wd: bool = True
    has_2wd_lo: bool = False
    gear_ratios: list[float] = field(default_factory=list)


@dataclass
class Brakes:
    default_braking_force: float = 0.0
    parking_brake_force: float = -1.0


@dataclass
class AntiLockBrakes:
    regulation_force: float = 0.0
    min_speed: int = 0
    pulse_per_sec: float = 0.0
    attr_is_on: bool = True
    attr_no_dashboard: bool = False
    attr_no_toggle: bool = False


@dataclass
class TractionControl:
    regulation_force: float = 0.0
    wheel_slip: float = 0.0
    fade_speed: float = 0.0
    pulse_per_sec: float = 0.0
    attr_is_on: bool = True
    attr_no_dashboard: bool = False
    attr_no_toggle: bool = False


@dataclass
class CruiseControl:
    min_speed: float = 0.0
    autobrake: int = 0


@dataclass
class SpeedLimiter:
    is_enabled: bool = False
    max_speed: float = 0.0


@dataclass
class Exhaust:
    reference_node: NodeRef = field(default_factory=NodeRef)
    direction_node: NodeRef = field(default_factory=NodeRef)
    particle_name: str = ""


@dataclass
class Particle:
    emitter_node: NodeRef = field(default_factory=NodeRef)
    reference_node: NodeRef = field(default_factory=NodeRef)
    particle_system_name: str = ""


@dataclass
class Flare2:
    reference_node: NodeRef = field(default_factory=NodeRef)
    node_axis_x: NodeRef = field(default_factory=NodeRef)
    node_axis_y: NodeRef = field(default_factory=NodeRef)
    offset: Vec3 = field(default_factory=lambda: Vec3(0.0, 0.0, 1.0))
    type: FlareType = FlareType.HEADLIGHT
    control_number: int = -1
    dashboard_link: str = ""
    blink_delay_milis: int = -2
    size: float = -1.0
    material_name: str = "default"


@dataclass
class MaterialFlareBinding:
    flare_number: int = 0
    material_name: str = ""


@dataclass
class ManagedMaterial:
    name: str = ""
    type: ManagedMaterialType = ManagedMaterialType.MESH_STANDARD
    options: ManagedMaterialsOptions = field(default_factory=ManagedMaterialsOptions)
    diffuse_map: str = ""
    damaged_diffuse_map: str = ""
    specular_map: str = ""


@dataclass
class SlideNode:
    """Slide node; the optional settings stay None unless given on the line."""
    slide_node: NodeRef = field(default_factory=NodeRef)
    rail_node_ranges: list[NodeRef] = field(default_factory=list)
    spring_rate: float | None = None
    break_force: float | None = None
    tolerance: float | None = None
    attachment_rate: float | None = None
    railgroup_id: int | None = None
    max_attach_dist: float | None = None
    constraint_flags: SlideNodeConstraint = SlideNodeConstraint.NONE


@dataclass
class RailGroup:
    id: int = 0
    node_list: list[NodeRef] = field(default_factory=list)


@dataclass
class SoundSource:
    node: NodeRef = field(default_factory=NodeRef)
    sound_script_name: str = ""


@dataclass
class SoundSource2:
    node: NodeRef = field(default_factory=NodeRef)
    mode: CameraMode = CameraMode.ALWAYS
    cinecam_index: int = 0
    sound_script_name: str = ""


@dataclass
class VideoCamera:
    reference_node: NodeRef = field(default_factory=NodeRef)
    left_node: NodeRef = field(default_factory=NodeRef)
    bottom_node: NodeRef = field(default_factory=NodeRef)
    alt_reference_node: NodeRef = field(default_factory=NodeRef)
    alt_orientation_node: NodeRef = field(default_factory=NodeRef)
    offset: Vec3 = field(default_factory=Vec3)
    rotation: Vec3 = field(default_factory=Vec3)
    field_of_view: float = 0.0
    texture_width: int = 0
    texture_height: int = 0
    min_clip_distance: float = 0.0
    max_clip_distance: float = 0.0
    camera_role: int = 0
    camera_mode: int = 0
    material_name: str = ""
    camera_name: str = ""


@dataclass
class Lockgroup:
    number: int = 0
    nodes: list[NodeRef] = field(default_factory=list)


@dataclass
class CollisionBox:
    nodes: list[NodeRef] = field(default_factory=list)


@dataclass
class CollisionRange:
    node_collision_range: float = 0.0


@dataclass
class SkeletonSettings:
    visibility_range_meters: float = DEFAULT_SKELETON_VISIBILITY_RANGE
    beam_thickness_meters: float = BEAM_SKELETON_DIAMETER


@dataclass
class Minimass:
    global_min_mass_kg: float = DEFAULT_MINIMASS
    option: MinimassOption = MinimassOption.DUMMY


@dataclass
class Globals:
    dry_mass: float = 0.0
    cargo_mass: float = 0.0
    material_name: str = ""


@dataclass
class GuiSettings:
    key: str = ""
    value: str = ""


@dataclass
class Guid:
    guid: str = ""


@dataclass
class Help:
    material: str = ""


@dataclass
class Fileinfo:
    unique_id: str = ""
    category_id: int = -1
    file_version: int = 0


@dataclass
class FileFormatVersion:
    version: int = 0


@dataclass
class Author:
    type: str = ""
    forum_account_id: int | None = None
    name: str = ""
    email: str = ""


# --------------------------
# Module and Document
# --------------------------

@dataclass
class Module:
    """
    A named set of element collections.

    The root module is always present; 'section <version> <name>' switches to
    a user module. Order within each list is declaration order.
    """
    name: str = ROOT_MODULE_NAME

    airbrakes: list[Airbrake] = field(default_factory=list)
    animators: list[Animator] = field(default_factory=list)
    antilockbrakes: list[AntiLockBrakes] = field(default_factory=list)
    author: list[Author] = field(default_factory=list)
    axles: list[Axle] = field(default_factory=list)
    beams: list[Beam] = field(default_factory=list)
    brakes: list[Brakes] = field(default_factory=list)
    camerarail: list[CameraRail] = field(default_factory=list)
    cameras: list[Camera] = field(default_factory=list)
    cinecam: list[Cinecam] = field(default_factory=list)
    collisionboxes: list[CollisionBox] = field(default_factory=list)
    commands2: list[Command2] = field(default_factory=list)
    contacters: list[NodeRef] = field(default_factory=list)
    cruisecontrol: list[CruiseControl] = field(default_factory=list)
    description: list[str] = field(default_factory=list)
    engine: list[Engine] = field(default_factory=list)
    engoption: list[Engoption] = field(default_factory=list)
    engturbo: list[Engturbo] = field(default_factory=list)
    exhausts: list[Exhaust] = field(default_factory=list)
    extcamera: list[ExtCamera] = field(default_factory=list)
    fileformatversion: list[FileFormatVersion] = field(default_factory=list)
    fileinfo: list[Fileinfo] = field(default_factory=list)
    fixes: list[NodeRef] = field(default_factory=list)
    flares2: list[Flare2] = field(default_factory=list)
    flexbodies: list[Flexbody] = field(default_factory=list)
    flexbodywheels: list[FlexBodyWheel] = field(default_factory=list)
    fusedrag: list[Fusedrag] = field(default_factory=list)
    globals: list[Globals] = field(default_factory=list)
    guid: list[Guid] = field(default_factory=list)
    guisettings: list[GuiSettings] = field(default_factory=list)
    help: list[Help] = field(default_factory=list)
    hooks: list[Hook] = field(default_factory=list)
    hydros: list[Hydro] = field(default_factory=list)
    interaxles: list[InterAxle] = field(default_factory=list)
    lockgroups: list[Lockgroup] = field(default_factory=list)
    managedmaterials: list[ManagedMaterial] = field(default_factory=list)
    materialflarebindings: list[MaterialFlareBinding] = field(default_factory=list)
    mesh_wheels: list[MeshWheel] = field(default_factory=list)
    minimass: list[Minimass] = field(default_factory=list)
    nodes: list[Node] = field(default_factory=list)
    particles: list[Particle] = field(default_factory=list)
    pistonprops: list[Pistonprop] = field(default_factory=list)
    props: list[Prop] = field(default_factory=list)
    railgroups: list[RailGroup] = field(default_factory=list)
    ropables: list[Ropable] = field(default_factory=list)
    ropes: list[Rope] = field(default_factory=list)
    rotators: list[Rotator] = field(default_factory=list)
    rotators2: list[Rotator2] = field(default_factory=list)
    screwprops: list[Screwprop] = field(default_factory=list)
    set_collision_range: list[CollisionRange] = field(default_factory=list)
    set_skeleton_settings: list[SkeletonSettings] = field(default_factory=list)
    shocks: list[Shock] = field(default_factory=list)
    shocks2: list[Shock2] = field(default_factory=list)
    shocks3: list[Shock3] = field(default_factory=list)
    slidenodes: list[SlideNode] = field(default_factory=list)
    soundsources: list[SoundSource] = field(default_factory=list)
    soundsources2: list[SoundSource2] = field(default_factory=list)
    speedlimiter: list[SpeedLimiter] = field(default_factory=list)
    submesh_groundmodel: list[str] = field(default_factory=list)
    submeshes: list[Submesh] = field(default_factory=list)
    ties: list[Tie] = field(default_factory=list)
    torquecurve: list[TorqueCurve] = field(default_factory=list)
    tractioncontrol: list[TractionControl] = field(default_factory=list)
    transfercase: list[TransferCase] = field(default_factory=list)
    triggers: list[Trigger] = field(default_factory=list)
    turbojets: list[Turbojet] = field(default_factory=list)
    turboprops2: list[Turboprop2] = field(default_factory=list)
    videocameras: list[VideoCamera] = field(default_factory=list)
    wheeldetachers: list[WheelDetacher] = field(default_factory=list)
    wheels: list[Wheel] = field(default_factory=list)
    wheels2: list[Wheel2] = field(default_factory=list)
    wings: list[Wing] = field(default_factory=list)


def _to_plain(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {k: _to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_plain(x) for x in obj]
    return obj


@dataclass
class Document:
    """
    Complete parsed truck definition.

    Attributes:
        name: Title, taken from the first non-comment line
        root_module: Module always present
        user_modules: Modules created by 'section', keyed by name
        hide_in_chooser .. slide_nodes_connect_instantly: Document-wide flags
    """
    name: str = ""
    root_module: Module = field(default_factory=Module)
    user_modules: dict[str, Module] = field(default_factory=dict)

    hide_in_chooser: bool = False
    enable_advanced_deformation: bool = False
    import_commands: bool = False
    forward_commands: bool = False
    lockgroup_default_nolock: bool = False
    rescuer: bool = False
    rollon: bool = False
    disable_default_sounds: bool = False
    slide_nodes_connect_instantly: bool = False

    def modules(self) -> list[Module]:
        """Root module first, then user modules in creation order."""
        return [self.root_module] + list(self.user_modules.values())

    def to_dict(self) -> dict[str, Any]:
        return _to_plain(asdict(self))
