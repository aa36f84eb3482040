"""
Parser of the Rigs of Rods truck definition format.

The format is line oriented. The first non-comment line is the title; every
other line is a keyword (flag, directive, section start, section end or module
switch) or a data line interpreted by the grammar of the open section.
Malformed lines are reported through the diagnostics reporter and skipped;
nothing aborts the parse except a failure of the input stream itself.

Usage:
    parser = RigParser()
    doc = parser.parse_file("semi.truck")
    print(doc.name, len(doc.root_module.beams))
    for msg in parser.diagnostics.messages:
        print(msg.format())
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Iterable, Optional
import io
import logging
import re

from .config import (
    NAMED_NODES_FILE_FORMAT_VERSION,
    ROOT_MODULE_NAME,
    DEFAULT_SPRING,
    DEFAULT_DAMP,
    BEAM_DEFORM,
    BEAM_BREAK,
    DEFAULT_BEAM_DIAMETER,
    BEAM_SKELETON_DIAMETER,
    DEFAULT_SKELETON_VISIBILITY_RANGE,
    ParserOptions,
)
from .diagnostics import DiagnosticsReporter, ErrorKind, Severity
from .rig_keywords import (
    Keyword,
    KeywordKind,
    identify_keyword,
    keyword_kind,
    sanitize_line,
    split_list,
    tokenize_line,
    SEPARATORS,
)
from .rig_model import (
    BUILTIN_BEAM_DEFAULTS,
    BUILTIN_INERTIA,
    BUILTIN_NODE_DEFAULTS,
    WING_CONTROL_LEGAL_FLAGS,
    AeroAnimatorOption,
    Airbrake,
    Animation,
    AnimationMode,
    AnimationSource,
    Animator,
    AnimatorOption,
    AntiLockBrakes,
    Author,
    Axle,
    Beam,
    BeamDefaults,
    BeamOption,
    BeaconProp,
    Brakes,
    Cab,
    CabOption,
    Camera,
    CameraMode,
    CameraRail,
    CameraSettings,
    Cinecam,
    CollisionBox,
    CollisionRange,
    Command2,
    CommandKeyTrigger,
    CruiseControl,
    DashboardProp,
    DefaultMinimass,
    DifferentialType,
    Document,
    EngineTrigger,
    Engine,
    Engoption,
    Engturbo,
    Exhaust,
    ExtCamera,
    ExtCameraMode,
    FileFormatVersion,
    Fileinfo,
    Flare2,
    FlareType,
    FlexBodyWheel,
    Flexbody,
    Fusedrag,
    Globals,
    Guid,
    GuiSettings,
    Help,
    Hook,
    HookToggleTrigger,
    Hydro,
    Inertia,
    InterAxle,
    Lockgroup,
    ManagedMaterial,
    ManagedMaterialType,
    ManagedMaterialsOptions,
    MaterialFlareBinding,
    MeshWheel,
    Minimass,
    MinimassOption,
    Module,
    MotorSource,
    MotorSourceKind,
    Node,
    NodeDefaults,
    NodeId,
    NodeOption,
    NodeRange,
    NodeRef,
    Particle,
    Pistonprop,
    Prop,
    PropSpecial,
    RailGroup,
    RefFlags,
    Ropable,
    Rope,
    Rotator,
    Rotator2,
    Screwprop,
    Shock,
    Shock2,
    Shock3,
    ShockOption,
    SkeletonSettings,
    SlideNode,
    SlideNodeConstraint,
    SoundSource,
    SoundSource2,
    SpeedLimiter,
    Submesh,
    Texcoord,
    Tie,
    TorqueCurve,
    TorqueCurveSample,
    TractionControl,
    TransferCase,
    Trigger,
    TriggerOption,
    Turbojet,
    Turboprop2,
    Vec3,
    VideoCamera,
    Wheel,
    Wheel2,
    WheelBraking,
    WheelDetacher,
    WheelPropulsion,
    WheelSide,
    Wing,
)
from .sequential_importer import SequentialImporter

logger = logging.getLogger(__name__)


# --------------------------
# Utilities
# --------------------------

_INT_PREFIX_RE = re.compile(r"\s*[+-]?\d+")
_FLOAT_PREFIX_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def to_int(token: str) -> int | None:
    """
    Parse the integer prefix of a token.

    Args:
        token: Text starting with optional whitespace, sign and decimal digits

    Returns:
        Integer value of the prefix, None if there are no digits

    Example:
        >>> to_int("12")
        12
        >>> to_int(" -3abc")
        -3
        >>> to_int("abc")
        None
    """
    m = _INT_PREFIX_RE.match(token)
    return int(m.group(0)) if m else None


def to_float(token: str) -> float | None:
    """
    Parse the longest numeric prefix of a token.

    Example:
        >>> to_float("0.25")
        0.25
        >>> to_float("1e3x")
        1000.0
        >>> to_float("x")
        None
    """
    m = _FLOAT_PREFIX_RE.match(token)
    return float(m.group(0)) if m else None


def to_bool(token: str) -> bool:
    """True for text starting with 'true', 'yes' or '1' (any case)."""
    return token.strip().lower().startswith(("true", "yes", "1"))


# --------------------------
# Per-line context and defaults
# --------------------------

@dataclass
class LineContext:
    """
    The line being processed: text, argument spans and typed accessors.

    Accessors report conversion problems and return the format's fallback
    value; they never raise.
    """
    line: str
    spans: list[tuple[int, int]]
    reporter: DiagnosticsReporter

    @property
    def num_args(self) -> int:
        return len(self.spans)

    def arg_str(self, index: int) -> str:
        start, length = self.spans[index]
        return self.line[start:start + length]

    def arg_char(self, index: int) -> str:
        return self.arg_str(index)[:1]

    def arg_int(self, index: int) -> int:
        text = self.arg_str(index)
        m = _INT_PREFIX_RE.match(text)
        if not m:
            self.reporter.error(ErrorKind.ARGUMENT_TYPE, f"Argument [{index + 1}] is not valid integer")
            return 0
        if m.end() != len(text):
            self.reporter.warning(ErrorKind.ARGUMENT_TYPE,
                                  f"Integer argument [{index + 1}] has invalid trailing characters")
        return int(m.group(0))

    def arg_float(self, index: int) -> float:
        value = to_float(self.arg_str(index))
        if value is None:
            self.reporter.error(ErrorKind.ARGUMENT_TYPE, f"Argument [{index + 1}] is not valid number")
            return 0.0
        return value

    def arg_bool(self, index: int) -> bool:
        return to_bool(self.arg_str(index))


@dataclass
class DefaultsStack:
    """Currently published defaults; each field is replaced, never mutated."""
    node: NodeDefaults = BUILTIN_NODE_DEFAULTS
    beam: BeamDefaults = BUILTIN_BEAM_DEFAULTS
    inertia: Inertia = BUILTIN_INERTIA
    managed_materials: ManagedMaterialsOptions = field(default_factory=ManagedMaterialsOptions)
    minimass: Optional[DefaultMinimass] = None
    detacher_group: int = 0


# --------------------------
# Option tables
# --------------------------

_FLAG_ATTRIBUTES = {
    Keyword.DISABLEDEFAULTSOUNDS: "disable_default_sounds",
    Keyword.ENABLE_ADVANCED_DEFORMATION: "enable_advanced_deformation",
    Keyword.FORWARDCOMMANDS: "forward_commands",
    Keyword.HIDEINCHOOSER: "hide_in_chooser",
    Keyword.IMPORTCOMMANDS: "import_commands",
    Keyword.LOCKGROUP_DEFAULT_NOLOCK: "lockgroup_default_nolock",
    Keyword.RESCUER: "rescuer",
    Keyword.ROLLON: "rollon",
    Keyword.SLIDENODE_CONNECT_INSTANTLY: "slide_nodes_connect_instantly",
}

_NODE_OPTIONS = {
    "l": NodeOption.LOAD_WEIGHT,
    "n": NodeOption.MOUSE_GRAB,
    "m": NodeOption.NO_MOUSE_GRAB,
    "f": NodeOption.NO_SPARKS,
    "x": NodeOption.EXHAUST_POINT,
    "y": NodeOption.EXHAUST_DIRECTION,
    "c": NodeOption.NO_GROUND_CONTACT,
    "h": NodeOption.HOOK_POINT,
    "e": NodeOption.TERRAIN_EDIT_POINT,
    "b": NodeOption.EXTRA_BUOYANCY,
    "p": NodeOption.NO_PARTICLES,
    "L": NodeOption.LOG,
}

_BEAM_OPTIONS = {
    "v": BeamOption.NONE,
    "i": BeamOption.INVISIBLE,
    "r": BeamOption.ROPE,
    "s": BeamOption.SUPPORT,
}

_CAB_OPTIONS = {
    "c": CabOption.CONTACT,
    "b": CabOption.BUOYANT,
    "D": CabOption.CONTACT | CabOption.BUOYANT,
    "p": CabOption.TOUGHER_10X,
    "u": CabOption.INVULNERABLE,
    "F": CabOption.TOUGHER_10X | CabOption.BUOYANT,
    "S": CabOption.INVULNERABLE | CabOption.BUOYANT,
    "n": CabOption.NONE,
}

_SHOCK_OPTIONS = {
    "n": ShockOption.NONE,
    "v": ShockOption.NONE,
    "i": ShockOption.INVISIBLE,
    "m": ShockOption.METRIC,
    "r": ShockOption.ACTIVE_RIGHT,
    "R": ShockOption.ACTIVE_RIGHT,
    "l": ShockOption.ACTIVE_LEFT,
    "L": ShockOption.ACTIVE_LEFT,
}

_SHOCK2_OPTIONS = {
    "n": ShockOption.NONE,
    "v": ShockOption.NONE,
    "i": ShockOption.INVISIBLE,
    "m": ShockOption.METRIC,
    "M": ShockOption.ABSOLUTE_METRIC,
    "s": ShockOption.SOFT_BUMP_BOUNDS,
}

_SHOCK3_OPTIONS = {
    "n": ShockOption.NONE,
    "v": ShockOption.NONE,
    "i": ShockOption.INVISIBLE,
    "m": ShockOption.METRIC,
    "M": ShockOption.ABSOLUTE_METRIC,
}

_TRIGGER_OPTIONS = {
    "i": TriggerOption.INVISIBLE,
    "c": TriggerOption.COMMAND_STYLE,
    "x": TriggerOption.START_OFF,
    "b": TriggerOption.BLOCK_KEYS,
    "B": TriggerOption.BLOCK_TRIGGERS,
    "A": TriggerOption.INV_BLOCK_TRIGGERS,
    "s": TriggerOption.SWITCH_CMD_NUM,
    "h": TriggerOption.UNLOCK_HOOKGROUPS_KEY,
    "H": TriggerOption.LOCK_HOOKGROUPS_KEY,
    "t": TriggerOption.CONTINUOUS,
    "E": TriggerOption.ENGINE_TRIGGER,
}

_HOOK_VALUE_OPTIONS = {
    "hookrange": ("option_hook_range", float),
    "speedcoef": ("option_speed_coef", float),
    "maxforce": ("option_max_force", float),
    "timer": ("option_timer", float),
    "hookgroup": ("option_hookgroup", int),
    "hgroup": ("option_hookgroup", int),
    "lockgroup": ("option_lockgroup", int),
    "lgroup": ("option_lockgroup", int),
    "shortlimit": ("option_min_range_meters", float),
    "short_limit": ("option_min_range_meters", float),
}

_HOOK_FLAG_OPTIONS = {
    "selflock": "flag_self_lock", "self-lock": "flag_self_lock", "self_lock": "flag_self_lock",
    "autolock": "flag_auto_lock", "auto-lock": "flag_auto_lock", "auto_lock": "flag_auto_lock",
    "nodisable": "flag_no_disable", "no-disable": "flag_no_disable", "no_disable": "flag_no_disable",
    "norope": "flag_no_rope", "no-rope": "flag_no_rope", "no_rope": "flag_no_rope",
    "visible": "flag_visible", "vis": "flag_visible",
}

_ANIMATION_MODE_KEYWORDS = {
    "autoanimate": AnimationMode.AUTO_ANIMATE,
    "noflip": AnimationMode.NO_FLIP,
    "bounce": AnimationMode.BOUNCE,
    "eventlock": AnimationMode.EVENT_LOCK,
}

_ANIMATION_MODES = {
    "x-rotation": AnimationMode.ROTATION_X,
    "y-rotation": AnimationMode.ROTATION_Y,
    "z-rotation": AnimationMode.ROTATION_Z,
    "x-offset": AnimationMode.OFFSET_X,
    "y-offset": AnimationMode.OFFSET_Y,
    "z-offset": AnimationMode.OFFSET_Z,
}

_ANIMATION_SOURCES = {
    "airspeed": AnimationSource.AIRSPEED,
    "vvi": AnimationSource.VERTICAL_VELOCITY,
    "altimeter100k": AnimationSource.ALTIMETER_100K,
    "altimeter10k": AnimationSource.ALTIMETER_10K,
    "altimeter1k": AnimationSource.ALTIMETER_1K,
    "aoa": AnimationSource.ANGLE_OF_ATTACK,
    "flap": AnimationSource.FLAP,
    "airbrake": AnimationSource.AIR_BRAKE,
    "roll": AnimationSource.ROLL,
    "pitch": AnimationSource.PITCH,
    "brakes": AnimationSource.BRAKES,
    "accel": AnimationSource.ACCEL,
    "clutch": AnimationSource.CLUTCH,
    "speedo": AnimationSource.SPEEDO,
    "tacho": AnimationSource.TACHO,
    "turbo": AnimationSource.TURBO,
    "parking": AnimationSource.PARKING,
    "shifterman1": AnimationSource.SHIFT_LEFT_RIGHT,
    "shifterman2": AnimationSource.SHIFT_BACK_FORTH,
    "sequential": AnimationSource.SEQUENTIAL_SHIFT,
    "shifterlin": AnimationSource.SHIFTERLIN,
    "torque": AnimationSource.TORQUE,
    "heading": AnimationSource.HEADING,
    "difflock": AnimationSource.DIFFLOCK,
    "rudderboat": AnimationSource.BOAT_RUDDER,
    "throttleboat": AnimationSource.BOAT_THROTTLE,
    "steeringwheel": AnimationSource.STEERING_WHEEL,
    "aileron": AnimationSource.AILERON,
    "elevator": AnimationSource.ELEVATOR,
    "rudderair": AnimationSource.AIR_RUDDER,
    "permanent": AnimationSource.PERMANENT,
    "event": AnimationSource.EVENT,
}

# Checked in this order; "aerotorq" must not be taken for "throttle" etc.
_MOTOR_SOURCE_PREFIXES = (
    ("throttle", MotorSourceKind.AERO_THROTTLE),
    ("rpm", MotorSourceKind.AERO_RPM),
    ("aerotorq", MotorSourceKind.AERO_TORQUE),
    ("aeropit", MotorSourceKind.AERO_PITCH),
    ("aerostatus", MotorSourceKind.AERO_STATUS),
)

_ANIMATOR_OPTIONS = {
    "vis": AnimatorOption.VISIBLE,
    "inv": AnimatorOption.INVISIBLE,
    "airspeed": AnimatorOption.AIRSPEED,
    "vvi": AnimatorOption.VERTICAL_VELOCITY,
    "altimeter100k": AnimatorOption.ALTIMETER_100K,
    "altimeter10k": AnimatorOption.ALTIMETER_10K,
    "altimeter1k": AnimatorOption.ALTIMETER_1K,
    "aoa": AnimatorOption.ANGLE_OF_ATTACK,
    "flap": AnimatorOption.FLAP,
    "airbrake": AnimatorOption.AIR_BRAKE,
    "roll": AnimatorOption.ROLL,
    "pitch": AnimatorOption.PITCH,
    "brakes": AnimatorOption.BRAKES,
    "accel": AnimatorOption.ACCEL,
    "clutch": AnimatorOption.CLUTCH,
    "speedo": AnimatorOption.SPEEDO,
    "tacho": AnimatorOption.TACHO,
    "turbo": AnimatorOption.TURBO,
    "parking": AnimatorOption.PARKING,
    "shifterman1": AnimatorOption.SHIFT_LEFT_RIGHT,
    "shifterman2": AnimatorOption.SHIFT_BACK_FORTH,
    "sequential": AnimatorOption.SEQUENTIAL_SHIFT,
    "shifterlin": AnimatorOption.GEAR_SELECT,
    "torque": AnimatorOption.TORQUE,
    "difflock": AnimatorOption.DIFFLOCK,
    "rudderboat": AnimatorOption.BOAT_RUDDER,
    "throttleboat": AnimatorOption.BOAT_THROTTLE,
}

_ANIMATOR_NUMBERED_RE = re.compile(r"(throttle|rpm|aerotorq|aeropit|aerostatus)(\d+)")

_AERO_ANIMATOR_OPTIONS = {
    "throttle": AeroAnimatorOption.THROTTLE,
    "rpm": AeroAnimatorOption.RPM,
    "aerotorq": AeroAnimatorOption.TORQUE,
    "aeropit": AeroAnimatorOption.PITCH,
    "aerostatus": AeroAnimatorOption.STATUS,
}

_AXLE_PROPERTY_RE = re.compile(
    r"\s*(?:w([12])\s*\(\s*([^\s()]+)\s+([^\s()]+)\s*\)|d\s*\(\s*([^\s()]*)\s*\))\s*"
)

_SLIDENODE_CONSTRAINTS = {
    "a": SlideNodeConstraint.ATTACH_ALL,
    "f": SlideNodeConstraint.ATTACH_FOREIGN,
    "s": SlideNodeConstraint.ATTACH_SELF,
    "n": SlideNodeConstraint.ATTACH_NONE,
}

_MANAGED_MATERIAL_TYPES = {t.value: t for t in ManagedMaterialType}

# Prop mesh name -> special prop; substring matches first, then prefixes
_PROP_SPECIAL_SUBSTRINGS = (
    ("leftmirror", PropSpecial.MIRROR_LEFT),
    ("rightmirror", PropSpecial.MIRROR_RIGHT),
    ("dashboard-rh", PropSpecial.DASHBOARD_RIGHT),
    ("dashboard", PropSpecial.DASHBOARD_LEFT),
)
_PROP_SPECIAL_PREFIXES = (
    ("spinprop", PropSpecial.AERO_PROP_SPIN),
    ("pale", PropSpecial.AERO_PROP_BLADE),
    ("seat2", PropSpecial.DRIVER_SEAT_2),
    ("seat", PropSpecial.DRIVER_SEAT),
    ("beacon", PropSpecial.BEACON),
    ("redbeacon", PropSpecial.REDBEACON),
    ("lightb", PropSpecial.LIGHTBAR),
)

_MAX_TURBOS = 4


# --------------------------
# Parser
# --------------------------

class RigParser:
    """
    Converts truck definition text into a Document.

    One instance parses one file at a time. `parse_file`, `parse_text` and
    `parse_lines` run a complete parse; `prepare`, `process_raw_line` and
    `finalize` expose the same process line by line.

    Args:
        options: ParserOptions; defaults are used when omitted
    """

    def __init__(self, options: ParserOptions | None = None) -> None:
        self.options = options if options is not None else ParserOptions()
        self.diagnostics = DiagnosticsReporter(sink=self.options.sink)
        self.importer = SequentialImporter(self.diagnostics)
        self.prepare()

    # --------------------------
    # Entry points
    # --------------------------

    def parse_file(self, path: str | Path) -> Document:
        """
        Parse a truck file from disk.

        Args:
            path: Path to the truck file

        Returns:
            Document with all parsed modules

        Raises:
            OSError: If the file cannot be opened
        """
        path = Path(path)
        with path.open("rb") as stream:
            return self.parse_lines(stream, filename=path.name)

    def parse_text(self, text: str, filename: str = "") -> Document:
        return self.parse_lines(io.StringIO(text), filename=filename)

    def parse_lines(self, lines: Iterable[str | bytes], filename: str = "") -> Document:
        self.prepare(filename)
        logger.debug("Parsing truck file '%s'", filename)
        iterator = iter(lines)
        while True:
            try:
                raw = next(iterator)
            except StopIteration:
                break
            except (OSError, UnicodeError) as exc:
                self.diagnostics.error(ErrorKind.IO, f"Could not read truck file: {exc}")
                break
            self.process_raw_line(raw)
        return self.finalize()

    def prepare(self, filename: str = "") -> None:
        """Reset all state for a new document."""
        self.filename = filename
        self.document = Document()
        self.current_module: Module = self.document.root_module
        self.current_block: Keyword | None = None
        self.staged_submesh: Submesh | None = None
        self.staged_camera_rail: CameraRail | None = None
        self.defaults = DefaultsStack()
        self.any_named_node_defined = False
        self.line_number = 1
        self.diagnostics.reset(filename)
        self.importer.init(enabled=True)

    def process_raw_line(self, raw: str | bytes) -> None:
        line = sanitize_line(raw, self.options.line_buffer_length)
        if line is not None:
            self.diagnostics.line_number = self.line_number
            self._process_line(line)
        self.line_number += 1

    def finalize(self) -> Document:
        """Flush the open block and run the sequential import pass."""
        self.diagnostics.keyword = "none"
        self._begin_block(None)
        self.importer.process(self.document)

        root = self.document.root_module
        logger.info(
            "Parsed '%s' (%s): %d module(s), %d node(s), %d beam(s), %d warning(s), %d error(s)",
            self.document.name, self.filename or "<text>", len(self.document.modules()),
            len(root.nodes), len(root.beams),
            self.diagnostics.count(Severity.WARNING), self.diagnostics.count(Severity.ERROR),
        )
        return self.document

    # --------------------------
    # State machine
    # --------------------------

    def _process_line(self, line: str) -> None:
        self.diagnostics.keyword = "none"

        # The first line which is not blank or a comment is the title
        if not self.document.name:
            self.document.name = line
            return

        if self.current_block in (Keyword.COMMENT, Keyword.DESCRIPTION):
            spans = []
        else:
            spans = tokenize_line(line, self.options.max_args)
        ctx = LineContext(line, spans, self.diagnostics)

        keyword = identify_keyword(line)
        if keyword is not None:
            self.diagnostics.keyword = keyword.value
            kind = keyword_kind(keyword)
            if kind == KeywordKind.FLAG:
                setattr(self.document, _FLAG_ATTRIBUTES[keyword], True)
            elif kind == KeywordKind.DIRECTIVE:
                self._DIRECTIVE_HANDLERS[keyword](self, ctx)
            elif kind == KeywordKind.MODULE:
                self._change_module(keyword, ctx)
            elif kind == KeywordKind.END:
                self._begin_block(None)
            elif kind == KeywordKind.SECTION:
                self._begin_block(keyword)
            return

        if self.current_block is None:
            return
        self.diagnostics.keyword = self.current_block.value
        handler = self._SECTION_HANDLERS.get(self.current_block)
        if handler is not None:
            handler(self, ctx)

    def _flush_staged(self) -> None:
        if self.staged_submesh is not None:
            self.current_module.submeshes.append(self.staged_submesh)
            self.staged_submesh = None

        if self.staged_camera_rail is not None:
            if not self.staged_camera_rail.nodes:
                self.diagnostics.warning(ErrorKind.STRUCTURAL, "Empty section 'camerarail', ignoring...")
            else:
                self.current_module.camerarail.append(self.staged_camera_rail)
            self.staged_camera_rail = None

    def _begin_block(self, keyword: Keyword | None) -> None:
        """Open a section, or close the current one when `keyword` is None."""
        # 'cab' and 'texcoords' fill the staged submesh
        if keyword not in (Keyword.CAB, Keyword.TEXCOORDS):
            self._flush_staged()
        if keyword == Keyword.CAMERARAIL:
            self.staged_camera_rail = CameraRail()
        self.current_block = keyword

    def _change_module(self, keyword: Keyword, ctx: LineContext) -> None:
        if keyword == Keyword.END_SECTION:
            if self.current_module is self.document.root_module:
                self.diagnostics.error(ErrorKind.STRUCTURAL,
                                       "Misplaced keyword 'end_section' (already in root module), ignoring...")
                return
            new_name = ROOT_MODULE_NAME
        else:
            # Syntax: "section VERSION NAME"; VERSION is unused
            if not self._check_num_args(ctx.num_args, 3):
                return
            new_name = ctx.arg_str(2)
            if new_name == self.current_module.name:
                self.diagnostics.error(ErrorKind.STRUCTURAL, "Attempt to re-enter current module, ignoring...")
                return

        self._begin_block(None)

        if new_name == ROOT_MODULE_NAME:
            self.current_module = self.document.root_module
            return
        module = self.document.user_modules.get(new_name)
        if module is None:
            module = Module(name=new_name)
            self.document.user_modules[new_name] = module
            logger.debug("Created module '%s' at line %d", new_name, self.line_number)
        self.current_module = module

    def _close_section(self) -> None:
        """Single-line keywords return to the root state without flushing staged blocks."""
        self.current_block = None

    # --------------------------
    # Argument helpers
    # --------------------------

    def _check_num_args(self, num_args: int, min_args: int) -> bool:
        if num_args < min_args:
            self.diagnostics.warning(
                ErrorKind.ARGUMENT_COUNT,
                f"Not enough arguments (got {num_args}, {min_args} needed), skipping line")
            return False
        return True

    def _parse_node_ref(self, text: str) -> NodeRef:
        text = text.strip()
        if self.importer.enabled:
            # Both interpretations are kept until the dialect is known
            num = abs(to_int(text) or 0)
            flags = RefFlags.IMPORT_STATE_IS_VALID | RefFlags.REGULAR_STATE_IS_VALID | RefFlags.REGULAR_STATE_IS_NAMED
            if self.any_named_node_defined:
                flags |= RefFlags.IMPORT_STATE_MUST_CHECK_NAMED_FIRST
            ref = NodeRef(text, num, flags, self.line_number)
        else:
            ref = NodeRef(text, 0, RefFlags.REGULAR_STATE_IS_VALID | RefFlags.REGULAR_STATE_IS_NAMED, self.line_number)
        return self.importer.add_ref(ref)

    def _arg_node(self, ctx: LineContext, index: int) -> NodeRef:
        return self._parse_node_ref(ctx.arg_str(index))

    def _arg_nodes(self, ctx: LineContext, start: int, count: int) -> list[NodeRef]:
        return [self._arg_node(ctx, i) for i in range(start, start + count)]

    def _arg_rigidity_node(self, ctx: LineContext, index: int) -> NodeRef:
        if ctx.arg_str(index) == "9999":  # null value
            return NodeRef()
        return self._arg_node(ctx, index)

    def _arg_nullable_node(self, ctx: LineContext, index: int) -> NodeRef:
        if to_float(ctx.arg_str(index)) == -1.0:
            return NodeRef()
        return self._arg_node(ctx, index)

    def _arg_braking(self, ctx: LineContext, index: int) -> WheelBraking:
        value = ctx.arg_int(index)
        try:
            return WheelBraking(value)
        except ValueError:
            self.diagnostics.error(ErrorKind.INVALID_VALUE,
                                   f"Bad value of param ~{index + 1} (braking), using 0 (not braked)")
            return WheelBraking.NONE

    def _arg_propulsion(self, ctx: LineContext, index: int) -> WheelPropulsion:
        value = ctx.arg_int(index)
        try:
            return WheelPropulsion(value)
        except ValueError:
            self.diagnostics.error(ErrorKind.INVALID_VALUE,
                                   f"Bad value of param ~{index + 1} (propulsion), using 0 (no propulsion)")
            return WheelPropulsion.NONE

    def _arg_wheel_side(self, ctx: LineContext, index: int) -> WheelSide:
        side = ctx.arg_char(index)
        if side == "r":
            return WheelSide.RIGHT
        if side != "l":
            self.diagnostics.warning(
                ErrorKind.INVALID_VALUE,
                f"Bad arg~{index + 1} 'side' (value: {side}), parsing as 'l' for backwards compatibility.")
        return WheelSide.LEFT

    def _arg_flare_type(self, ctx: LineContext, index: int) -> FlareType:
        value = ctx.arg_char(index)
        try:
            return FlareType(value)
        except ValueError:
            self.diagnostics.warning(
                ErrorKind.INVALID_VALUE,
                f"Invalid flare type '{value}', falling back to type 'f' (front light)...")
            return FlareType.HEADLIGHT

    def _arg_wing_surface(self, ctx: LineContext, index: int) -> str:
        value = ctx.arg_str(index)
        if value[0] not in WING_CONTROL_LEGAL_FLAGS:
            self.diagnostics.error(
                ErrorKind.INVALID_VALUE,
                f"Invalid argument ~{index + 1} 'control surface' (value: {value}), "
                f"allowed are: <{WING_CONTROL_LEGAL_FLAGS}>, ignoring...")
            return "n"
        if len(value) > 1:
            self.diagnostics.warning(
                ErrorKind.INVALID_VALUE,
                f"Argument ~{index + 1} 'control surface' (value: {value}), should be only 1 letter.")
        return value[0]

    def _arg_minimass_option(self, ctx: LineContext, index: int) -> MinimassOption:
        value = ctx.arg_str(index)
        try:
            return MinimassOption(value[0])
        except ValueError:
            self.diagnostics.warning(
                ErrorKind.INVALID_VALUE,
                f"Not a valid minimass option: {value}, falling back to 'n' (dummy)")
            return MinimassOption.DUMMY

    def _arg_managed_tex(self, ctx: LineContext, index: int) -> str:
        name = ctx.arg_str(index)
        return "" if name.startswith("-") else name

    def _arg_vec3(self, ctx: LineContext, index: int) -> Vec3:
        return Vec3(ctx.arg_float(index), ctx.arg_float(index + 1), ctx.arg_float(index + 2))

    def _parse_float_token(self, token: str) -> float:
        value = to_float(token)
        if value is None:
            self.diagnostics.error(ErrorKind.ARGUMENT_TYPE, f"Value '{token.strip()}' is not valid number")
            return 0.0
        return value

    def _parse_int_token(self, token: str) -> int:
        value = to_int(token)
        if value is None:
            self.diagnostics.error(ErrorKind.ARGUMENT_TYPE, f"Value '{token.strip()}' is not valid integer")
            return 0
        return value

    def _fold_options(self, options_str: str, table: dict, initial):
        """OR together the flags of each option character; unknown characters are reported and skipped."""
        result = initial
        for c in options_str:
            flag = table.get(c)
            if flag is None:
                self.diagnostics.warning(ErrorKind.UNKNOWN_OPTION, f"ignoring invalid option '{c}'")
                continue
            result |= flag
        return result

    def _parse_node_options(self, options_str: str) -> NodeOption:
        options = NodeOption.NONE
        for c in options_str:
            flag = _NODE_OPTIONS.get(c)
            if flag is None:
                self.diagnostics.warning(ErrorKind.UNKNOWN_OPTION, f"invalid option '{c}'")
                continue
            # 'n' and 'm' are exclusive; the last one wins
            if flag == NodeOption.MOUSE_GRAB:
                options &= ~NodeOption.NO_MOUSE_GRAB
            elif flag == NodeOption.NO_MOUSE_GRAB:
                options &= ~NodeOption.MOUSE_GRAB
            options |= flag
        return options

    def _parse_optional_inertia(self, ctx: LineContext, index: int) -> Inertia:
        values = {}
        for offset, name in enumerate(("start_delay_factor", "stop_delay_factor", "start_function", "stop_function")):
            if ctx.num_args <= index + offset:
                break
            values[name] = ctx.arg_float(index + offset) if offset < 2 else ctx.arg_str(index + offset)
        return replace(BUILTIN_INERTIA, **values)

    def _parse_camera_settings(self, settings: CameraSettings, text: str) -> None:
        value = to_int(text) or 0
        if value >= 0:
            settings.mode = CameraMode.CINECAM
            settings.cinecam_index = value
        elif value >= -2:
            settings.mode = CameraMode(value)
        else:
            self.diagnostics.error(ErrorKind.INVALID_VALUE, f"invalid value ({value}), skipping line")

    def _parse_differential_types(self, options_str: str) -> list[DifferentialType]:
        types = []
        for c in options_str:
            try:
                types.append(DifferentialType(c))
            except ValueError:
                self.diagnostics.warning(ErrorKind.UNKNOWN_OPTION, f"ignoring invalid differential type '{c}'")
        return types

    def _parse_mode_attributes(self, tokens: list[str], target) -> None:
        """`mode:a&b` attributes of 'TractionControl' and 'AntiLockBrakes'."""
        for token in tokens:
            parts = split_list(token, ":")
            key = parts[0].strip().lower() if parts else ""
            if key == "mode" and len(parts) == 2:
                for attr in parts[1].split("&"):
                    attr = attr.strip().lower()
                    if attr.startswith("nodash"):
                        target.attr_no_dashboard = True
                    elif attr.startswith("notoggle"):
                        target.attr_no_toggle = True
                    elif attr.startswith("on"):
                        target.attr_is_on = True
                    elif attr.startswith("off"):
                        target.attr_is_on = False
                    else:
                        self.diagnostics.warning(ErrorKind.UNKNOWN_OPTION, f"ignoring invalid mode '{attr}'")
            else:
                self.diagnostics.error(ErrorKind.INVALID_VALUE, "missing mode")
                target.attr_no_dashboard = False
                target.attr_no_toggle = False
                target.attr_is_on = True

    def _payload_tokens(self, ctx: LineContext, keyword: Keyword) -> list[str]:
        """Comma separated payload following the keyword."""
        payload = ctx.line[len(keyword.value):].lstrip(SEPARATORS)
        return [t.strip() for t in split_list(payload, ",")]

    # --------------------------
    # Directives
    # --------------------------

    def _parse_directive_add_animation(self, ctx: LineContext) -> None:
        tokens = self._payload_tokens(ctx, Keyword.ADD_ANIMATION)
        if not self._check_num_args(len(tokens), 4):
            return
        if not self.current_module.props:
            self.diagnostics.error(ErrorKind.STRUCTURAL, "No prop to add animation to, ignoring...")
            return

        animation = Animation(
            ratio=self._parse_float_token(tokens[0]),
            lower_limit=self._parse_float_token(tokens[1]),
            upper_limit=self._parse_float_token(tokens[2]),
        )

        for token in tokens[3:]:
            entry = [e.strip() for e in split_list(token, ":")]
            warning = ""
            if len(entry) == 1:
                mode = _ANIMATION_MODE_KEYWORDS.get(entry[0])
                if mode is None:
                    warning = f"Invalid keyword: {entry[0]}"
                else:
                    animation.mode |= mode
            elif len(entry) == 2 and entry[0] == "mode":
                for value in (v.strip() for v in split_list(entry[1], "|")):
                    mode = _ANIMATION_MODES.get(value)
                    if mode is None:
                        warning = f"Invalid 'mode': {entry[1]}, ignoring..."
                    else:
                        animation.mode |= mode
            elif len(entry) == 2 and entry[0] == "event":
                animation.event = entry[1].upper()
            elif len(entry) == 2 and entry[0] == "source":
                for value in (v.strip() for v in split_list(entry[1], "|")):
                    source = _ANIMATION_SOURCES.get(value)
                    if source is not None:
                        animation.source |= source
                        continue
                    motor_source = self._parse_motor_source(value)
                    if motor_source is None:
                        warning = f"Invalid 'source': {entry[1]}, ignoring..."
                    else:
                        animation.motor_sources.append(motor_source)
            elif len(entry) == 2:
                warning = f"Invalid keyword: {entry[0]}, ignoring..."
            else:
                warning = f"Invalid item: {entry[0] if entry else token}, ignoring..."

            if warning:
                self.diagnostics.warning(ErrorKind.INVALID_VALUE, f"Ignoring invalid token '{token}' ({warning})")

        self.current_module.props[-1].animations.append(animation)

    def _parse_motor_source(self, value: str) -> MotorSource | None:
        for prefix, kind in _MOTOR_SOURCE_PREFIXES:
            if value.startswith(prefix):
                return MotorSource(source=kind, motor=abs(to_int(value[len(prefix):]) or 0))
        return None

    def _parse_directive_antilockbrakes(self, ctx: LineContext) -> None:
        tokens = self._payload_tokens(ctx, Keyword.ANTILOCKBRAKES)
        if not self._check_num_args(len(tokens), 2):
            return

        alb = AntiLockBrakes()
        alb.regulation_force = self._parse_float_token(tokens[0])
        alb.min_speed = self._parse_int_token(tokens[1])
        if len(tokens) > 3:
            alb.pulse_per_sec = self._parse_float_token(tokens[2])
        self._parse_mode_attributes(tokens[3:], alb)

        self.current_module.antilockbrakes.append(alb)

    def _parse_directive_tractioncontrol(self, ctx: LineContext) -> None:
        tokens = self._payload_tokens(ctx, Keyword.TRACTIONCONTROL)
        if not self._check_num_args(len(tokens), 2):
            return

        tc = TractionControl()
        tc.regulation_force = self._parse_float_token(tokens[0])
        tc.wheel_slip = self._parse_float_token(tokens[1])
        if len(tokens) > 2:
            tc.fade_speed = self._parse_float_token(tokens[2])
        if len(tokens) > 3:
            tc.pulse_per_sec = self._parse_float_token(tokens[3])
        self._parse_mode_attributes(tokens[4:], tc)

        self.current_module.tractioncontrol.append(tc)

    def _parse_directive_author(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        author = Author(type=ctx.arg_str(1))
        if ctx.num_args > 2:
            author.forum_account_id = ctx.arg_int(2)
        if ctx.num_args > 3:
            author.name = ctx.arg_str(3)
        if ctx.num_args > 4:
            author.email = ctx.arg_str(4)

        self.current_module.author.append(author)
        self._close_section()

    def _parse_directive_fileinfo(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        fileinfo = Fileinfo(unique_id=ctx.arg_str(1).strip())
        if ctx.num_args > 2:
            fileinfo.category_id = ctx.arg_int(2)
        if ctx.num_args > 3:
            fileinfo.file_version = ctx.arg_int(3)

        self.current_module.fileinfo.append(fileinfo)
        self._close_section()

    def _parse_directive_fileformatversion(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        version = ctx.arg_int(1)
        self.current_module.fileformatversion.append(FileFormatVersion(version=version))
        self._close_section()
        if version >= NAMED_NODES_FILE_FORMAT_VERSION:
            self.importer.disable()

    def _parse_directive_backmesh(self, ctx: LineContext) -> None:
        if self.staged_submesh is None:
            self.diagnostics.error(ErrorKind.STRUCTURAL, "must come after 'submesh'")
            return
        self.staged_submesh.backmesh = True

    def _parse_directive_submesh(self, ctx: LineContext) -> None:
        self._begin_block(None)  # flush the current submesh
        self.staged_submesh = Submesh()

    def _parse_directive_submesh_groundmodel(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.current_module.submesh_groundmodel.append(ctx.arg_str(1))

    def _parse_directive_cruisecontrol(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 3):
            return
        self.current_module.cruisecontrol.append(
            CruiseControl(min_speed=ctx.arg_float(1), autobrake=ctx.arg_int(2)))

    def _parse_directive_speedlimiter(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.current_module.speedlimiter.append(SpeedLimiter(is_enabled=True, max_speed=ctx.arg_float(1)))

    def _parse_directive_set_collision_range(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.current_module.set_collision_range.append(CollisionRange(node_collision_range=ctx.arg_float(1)))

    def _parse_directive_guid(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.current_module.guid.append(Guid(guid=ctx.arg_str(1)))

    def _parse_directive_extcamera(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        if not self.current_module.extcamera:
            self.current_module.extcamera.append(ExtCamera())
        extcam = self.current_module.extcamera[0]

        mode = ctx.arg_str(1)
        if mode == "classic":
            extcam.mode = ExtCameraMode.CLASSIC
        elif mode == "cinecam":
            extcam.mode = ExtCameraMode.CINECAM
        elif mode == "node" and ctx.num_args > 2:
            extcam.mode = ExtCameraMode.NODE
            extcam.node = self._arg_node(ctx, 2)
        else:
            self.diagnostics.warning(ErrorKind.INVALID_VALUE, f"Invalid camera mode '{mode}', ignoring...")

    def _parse_directive_detacher_group(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        if ctx.arg_str(1) == "end":
            self.defaults.detacher_group = 0
        else:
            self.defaults.detacher_group = ctx.arg_int(1)

    def _parse_directive_prop_camera_mode(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        if not self.current_module.props:
            self.diagnostics.error(ErrorKind.STRUCTURAL, "No prop defined yet, ignoring...")
            return
        self._parse_camera_settings(self.current_module.props[-1].camera_settings, ctx.arg_str(1))

    def _parse_directive_flexbody_camera_mode(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        if not self.current_module.flexbodies:
            self.diagnostics.error(ErrorKind.STRUCTURAL, "No flexbody defined yet, ignoring...")
            return
        self._parse_camera_settings(self.current_module.flexbodies[-1].camera_settings, ctx.arg_str(1))

    def _parse_directive_forset(self, ctx: LineContext) -> None:
        """
        Node ranges imported by the last flexbody.

        Syntax: "forset" followed by ','-separated items, each a node
        number or a "first-last" pair of node numbers.
        """
        if not self.current_module.flexbodies:
            self.diagnostics.error(ErrorKind.STRUCTURAL, "No flexbody defined yet, ignoring...")
            return
        flexbody = self.current_module.flexbodies[-1]

        for item in split_list(ctx.line[len(Keyword.FORSET.value):], ","):
            item = item.strip()
            if not item:
                continue
            first, hyphen, last = item.partition("-")
            if hyphen:
                start = self._forset_ref(first) if first.strip() else NodeRef("", 0, RefFlags.IMPORT_STATE_IS_VALID,
                                                                             self.line_number)
                flexbody.node_list_to_import.append(NodeRange(start, self._forset_ref(last)))
            else:
                flexbody.node_list_to_import.append(NodeRange(self._forset_ref(item), self._forset_ref(item)))

    def _forset_ref(self, text: str) -> NodeRef:
        """Forset items are node numbers only."""
        m = _INT_PREFIX_RE.match(text)
        digits = m.group(0).strip() if m else ""
        return NodeRef(digits or text.strip(), abs(to_int(text) or 0), RefFlags.IMPORT_STATE_IS_VALID,
                       self.line_number)

    def _parse_directive_set_beam_defaults(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        current = self.defaults.beam
        n = ctx.num_args
        springiness = ctx.arg_float(1)
        damping = ctx.arg_float(2) if n > 2 else current.damping_constant
        deform = ctx.arg_float(3) if n > 3 else current.deformation_threshold
        breaking = ctx.arg_float(4) if n > 4 else current.breaking_threshold
        diameter = ctx.arg_float(5) if n > 5 else current.visual_beam_diameter
        material = ctx.arg_str(6) if n > 6 else current.beam_material_name
        plastic = ctx.arg_float(7) if n > 7 else current.plastic_deform_coef

        plastic_user_defined = current.is_plastic_deform_coef_user_defined
        if n > 7 and plastic >= 0.0:
            plastic_user_defined = True

        # Negative values select the built-in defaults
        self.defaults.beam = replace(
            current,
            springiness=springiness if springiness >= 0.0 else DEFAULT_SPRING,
            damping_constant=damping if damping >= 0.0 else DEFAULT_DAMP,
            deformation_threshold=deform if deform >= 0.0 else BEAM_DEFORM,
            breaking_threshold=breaking if breaking >= 0.0 else BEAM_BREAK,
            visual_beam_diameter=diameter if diameter >= 0.0 else DEFAULT_BEAM_DIAMETER,
            beam_material_name=material,
            plastic_deform_coef=plastic if plastic >= 0.0 else current.plastic_deform_coef,
            enable_advanced_deformation=self.document.enable_advanced_deformation,
            is_user_defined=True,
            is_plastic_deform_coef_user_defined=plastic_user_defined,
        )

    def _parse_directive_set_beam_defaults_scale(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 5):
            return

        current = self.defaults.beam
        self.defaults.beam = replace(current, scale=replace(
            current.scale,
            springiness=ctx.arg_float(1),
            damping_constant=ctx.arg_float(2),
            deformation_threshold_constant=ctx.arg_float(3),
            breaking_threshold_constant=ctx.arg_float(4),
        ))

    def _parse_directive_set_node_defaults(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        n = ctx.num_args
        load_weight = ctx.arg_float(1)
        friction = ctx.arg_float(2) if n > 2 else -1.0
        volume = ctx.arg_float(3) if n > 3 else -1.0
        surface = ctx.arg_float(4) if n > 4 else -1.0
        options = ctx.arg_str(5) if n > 5 else ""

        builtin = BUILTIN_NODE_DEFAULTS
        self.defaults.node = replace(
            self.defaults.node,
            load_weight=load_weight if load_weight >= 0.0 else builtin.load_weight,
            friction=friction if friction >= 0.0 else builtin.friction,
            volume=volume if volume >= 0.0 else builtin.volume,
            surface=surface if surface >= 0.0 else builtin.surface,
            options=self._parse_node_options(options),
        )

    def _parse_directive_set_inertia_defaults(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        start_delay = ctx.arg_float(1)
        stop_delay = ctx.arg_float(2) if ctx.num_args > 2 else 0.0
        if start_delay < 0.0 or stop_delay < 0.0:
            self.defaults.inertia = BUILTIN_INERTIA
            return

        inertia = replace(self.defaults.inertia, start_delay_factor=start_delay, stop_delay_factor=stop_delay)
        if ctx.num_args > 3:
            inertia = replace(inertia, start_function=ctx.arg_str(3))
        if ctx.num_args > 4:
            inertia = replace(inertia, stop_function=ctx.arg_str(4))
        self.defaults.inertia = inertia

    def _parse_directive_set_managedmaterials_options(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.defaults.managed_materials = ManagedMaterialsOptions(double_sided=ctx.arg_char(1) != "0")

    def _parse_directive_set_default_minimass(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.defaults.minimass = DefaultMinimass(min_mass_kg=ctx.arg_float(1))

    def _parse_directive_set_skeleton_settings(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        if not self.current_module.set_skeleton_settings:
            self.current_module.set_skeleton_settings.append(SkeletonSettings())
        skel = self.current_module.set_skeleton_settings[0]

        skel.visibility_range_meters = ctx.arg_float(1)
        if ctx.num_args > 2:
            skel.beam_thickness_meters = ctx.arg_float(2)

        if skel.visibility_range_meters < 0.0:
            skel.visibility_range_meters = DEFAULT_SKELETON_VISIBILITY_RANGE
        if skel.beam_thickness_meters < 0.0:
            skel.beam_thickness_meters = BEAM_SKELETON_DIAMETER

    # --------------------------
    # Sections: structure
    # --------------------------

    def _parse_nodes(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 4):
            return

        node = Node(
            node_defaults=self.defaults.node,
            beam_defaults=self.defaults.beam,
            default_minimass=self.defaults.minimass,
            detacher_group=self.defaults.detacher_group,
        )
        if self.current_block == Keyword.NODES2:
            name = ctx.arg_str(0)
            node.id = NodeId(name=name)
            self.importer.add_named_node(name)
            self.any_named_node_defined = True
        else:
            num = ctx.arg_int(0)
            node.id = NodeId(num=num)
            self.importer.add_numbered_node(num)

        node.position = self._arg_vec3(ctx, 1)
        if ctx.num_args > 4:
            node.options = self._parse_node_options(ctx.arg_str(4))
        if ctx.num_args > 5:
            if node.options & NodeOption.LOAD_WEIGHT:
                node.load_weight_override = ctx.arg_float(5)
            else:
                self.diagnostics.warning(
                    ErrorKind.INVALID_VALUE,
                    "Node has load-weight-override value specified, but option 'l' is not present. Ignoring value...")

        self.current_module.nodes.append(node)

    def _parse_beams(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        beam = Beam(defaults=self.defaults.beam, detacher_group=self.defaults.detacher_group)
        beam.nodes = self._arg_nodes(ctx, 0, 2)
        if ctx.num_args > 2:
            beam.options = self._fold_options(ctx.arg_str(2), _BEAM_OPTIONS, BeamOption.NONE)
        if ctx.num_args > 3 and beam.options & BeamOption.SUPPORT:
            factor = ctx.arg_int(3)
            beam.extension_break_limit = float(factor) if factor > 0 else 0.0

        self.current_module.beams.append(beam)

    def _parse_fixes(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 1):
            return
        self.current_module.fixes.append(self._arg_node(ctx, 0))

    def _parse_contacters(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 1):
            return
        self.current_module.contacters.append(self._arg_node(ctx, 0))

    def _parse_minimass(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 1):
            return

        minimass = Minimass(global_min_mass_kg=ctx.arg_float(0))
        if ctx.num_args > 1:
            minimass.option = self._arg_minimass_option(ctx, 1)

        self.current_module.minimass.append(minimass)
        self._close_section()

    def _parse_globals(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        globals_ = Globals(dry_mass=ctx.arg_float(0), cargo_mass=ctx.arg_float(1))
        if ctx.num_args > 2:
            globals_.material_name = ctx.arg_str(2)

        self.current_module.globals.append(globals_)

    def _parse_collisionboxes(self, ctx: LineContext) -> None:
        box = CollisionBox(nodes=[self._parse_node_ref(t) for t in split_list(ctx.line, ",") if t.strip()])
        self.current_module.collisionboxes.append(box)

    def _parse_lockgroups(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        lockgroup = Lockgroup(number=ctx.arg_int(0), nodes=self._arg_nodes(ctx, 1, ctx.num_args - 1))
        self.current_module.lockgroups.append(lockgroup)

    def _parse_railgroups(self, ctx: LineContext) -> None:
        args = split_list(ctx.line, ",")
        if not self._check_num_args(len(args), 3):
            return
        railgroup = RailGroup(id=self._parse_int_token(args[0]), node_list=[self._parse_node_ref(a) for a in args[1:]])
        self.current_module.railgroups.append(railgroup)

    def _parse_slidenodes(self, ctx: LineContext) -> None:
        args = split_list(ctx.line, ", ")
        if not self._check_num_args(len(args), 2):
            return

        slidenode = SlideNode(slide_node=self._parse_node_ref(args[0]))
        in_rail_node_list = True

        for arg in args[1:]:
            option = arg[0].upper()
            if option == "S":
                slidenode.spring_rate = self._parse_float_token(arg[1:])
            elif option == "B":
                slidenode.break_force = self._parse_float_token(arg[1:])
            elif option == "T":
                slidenode.tolerance = self._parse_float_token(arg[1:])
            elif option == "R":
                slidenode.attachment_rate = self._parse_float_token(arg[1:])
            elif option == "G":
                slidenode.railgroup_id = self._parse_int_token(arg[1:])
            elif option == "D":
                slidenode.max_attach_dist = self._parse_float_token(arg[1:])
            elif option == "C":
                constraint = _SLIDENODE_CONSTRAINTS.get(arg[1:2])
                if constraint is None:
                    self.diagnostics.warning(ErrorKind.UNKNOWN_OPTION, f"Ignoring invalid option '{arg[1:2]}'")
                else:
                    slidenode.constraint_flags |= constraint
            elif in_rail_node_list:
                slidenode.rail_node_ranges.append(self._parse_node_ref(arg))
                continue
            else:
                self.diagnostics.warning(ErrorKind.INVALID_VALUE,
                                         f"Rail node '{arg}' follows slide node options, ignoring...")
                continue
            in_rail_node_list = False

        self.current_module.slidenodes.append(slidenode)

    # --------------------------
    # Sections: wheels
    # --------------------------

    def _fill_base_wheel(self, wheel, ctx: LineContext, rays: int) -> None:
        """Rays, nodes, rigidity, braking, propulsion, arm node and mass; consecutive from `rays`."""
        wheel.node_defaults = self.defaults.node
        wheel.beam_defaults = self.defaults.beam
        wheel.num_rays = ctx.arg_int(rays)
        wheel.nodes = self._arg_nodes(ctx, rays + 1, 2)
        wheel.rigidity_node = self._arg_rigidity_node(ctx, rays + 3)
        wheel.braking = self._arg_braking(ctx, rays + 4)
        wheel.propulsion = self._arg_propulsion(ctx, rays + 5)
        wheel.reference_arm_node = self._arg_node(ctx, rays + 6)
        wheel.mass = ctx.arg_float(rays + 7)

    def _register_wheel(self, keyword: Keyword, wheel) -> None:
        if self.importer.enabled:
            self.importer.generate_nodes_for_wheel(keyword, wheel.num_rays, wheel)

    def _parse_wheels(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 14):
            return

        wheel = Wheel(radius=ctx.arg_float(0), width=ctx.arg_float(1))
        self._fill_base_wheel(wheel, ctx, 2)
        wheel.springiness = ctx.arg_float(10)
        wheel.damping = ctx.arg_float(11)
        wheel.face_material_name = ctx.arg_str(12)
        wheel.band_material_name = ctx.arg_str(13)

        self._register_wheel(Keyword.WHEELS, wheel)
        self.current_module.wheels.append(wheel)

    def _parse_wheels2(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 17):
            return

        wheel = Wheel2(rim_radius=ctx.arg_float(0), tyre_radius=ctx.arg_float(1), width=ctx.arg_float(2))
        self._fill_base_wheel(wheel, ctx, 3)
        wheel.rim_springiness = ctx.arg_float(11)
        wheel.rim_damping = ctx.arg_float(12)
        wheel.tyre_springiness = ctx.arg_float(13)
        wheel.tyre_damping = ctx.arg_float(14)
        wheel.face_material_name = ctx.arg_str(15)
        wheel.band_material_name = ctx.arg_str(16)

        self._register_wheel(Keyword.WHEELS2, wheel)
        self.current_module.wheels2.append(wheel)

    def _parse_meshwheels(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 16):
            return

        wheel = MeshWheel(
            is_meshwheel2=self.current_block == Keyword.MESHWHEELS2,
            tyre_radius=ctx.arg_float(0),
            rim_radius=ctx.arg_float(1),
            width=ctx.arg_float(2),
        )
        self._fill_base_wheel(wheel, ctx, 3)
        wheel.spring = ctx.arg_float(11)
        wheel.damping = ctx.arg_float(12)
        wheel.side = self._arg_wheel_side(ctx, 13)
        wheel.mesh_name = ctx.arg_str(14)
        wheel.material_name = ctx.arg_str(15)

        self._register_wheel(self.current_block, wheel)
        self.current_module.mesh_wheels.append(wheel)

    def _parse_flexbodywheels(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 16):
            return

        wheel = FlexBodyWheel(tyre_radius=ctx.arg_float(0), rim_radius=ctx.arg_float(1), width=ctx.arg_float(2))
        self._fill_base_wheel(wheel, ctx, 3)
        wheel.tyre_springiness = ctx.arg_float(11)
        wheel.tyre_damping = ctx.arg_float(12)
        wheel.rim_springiness = ctx.arg_float(13)
        wheel.rim_damping = ctx.arg_float(14)
        wheel.side = self._arg_wheel_side(ctx, 15)
        if ctx.num_args > 16:
            wheel.rim_mesh_name = ctx.arg_str(16)
        if ctx.num_args > 17:
            wheel.tyre_mesh_name = ctx.arg_str(17)

        self._register_wheel(Keyword.FLEXBODYWHEELS, wheel)
        self.current_module.flexbodywheels.append(wheel)

    def _parse_wheeldetachers(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.current_module.wheeldetachers.append(
            WheelDetacher(wheel_id=ctx.arg_int(0), detacher_group=ctx.arg_int(1)))

    # --------------------------
    # Sections: suspension and actuators
    # --------------------------

    def _parse_shocks(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 7):
            return

        shock = Shock(beam_defaults=self.defaults.beam, detacher_group=self.defaults.detacher_group)
        shock.nodes = self._arg_nodes(ctx, 0, 2)
        shock.spring_rate = ctx.arg_float(2)
        shock.damping = ctx.arg_float(3)
        shock.short_bound = ctx.arg_float(4)
        shock.long_bound = ctx.arg_float(5)
        shock.precompression = ctx.arg_float(6)
        if ctx.num_args > 7:
            shock.options = self._fold_options(ctx.arg_str(7), _SHOCK_OPTIONS, ShockOption.NONE)

        self.current_module.shocks.append(shock)

    def _parse_shocks2(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 13):
            return

        shock = Shock2(beam_defaults=self.defaults.beam, detacher_group=self.defaults.detacher_group)
        shock.nodes = self._arg_nodes(ctx, 0, 2)
        (shock.spring_in, shock.damp_in, shock.progress_factor_spring_in, shock.progress_factor_damp_in,
         shock.spring_out, shock.damp_out, shock.progress_factor_spring_out, shock.progress_factor_damp_out,
         shock.short_bound, shock.long_bound, shock.precompression) = [ctx.arg_float(i) for i in range(2, 13)]
        if ctx.num_args > 13:
            shock.options = self._fold_options(ctx.arg_str(13), _SHOCK2_OPTIONS, ShockOption.NONE)

        self.current_module.shocks2.append(shock)

    def _parse_shocks3(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 15):
            return

        shock = Shock3(beam_defaults=self.defaults.beam, detacher_group=self.defaults.detacher_group)
        shock.nodes = self._arg_nodes(ctx, 0, 2)
        (shock.spring_in, shock.damp_in, shock.damp_in_slow, shock.split_vel_in, shock.damp_in_fast,
         shock.spring_out, shock.damp_out, shock.damp_out_slow, shock.split_vel_out, shock.damp_out_fast,
         shock.short_bound, shock.long_bound, shock.precompression) = [ctx.arg_float(i) for i in range(2, 15)]
        if ctx.num_args > 15:
            shock.options = self._fold_options(ctx.arg_str(15), _SHOCK3_OPTIONS, ShockOption.NONE)

        self.current_module.shocks3.append(shock)

    def _parse_hydros(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 3):
            return

        hydro = Hydro(
            inertia_defaults=self.defaults.inertia,
            beam_defaults=self.defaults.beam,
            detacher_group=self.defaults.detacher_group,
        )
        hydro.nodes = self._arg_nodes(ctx, 0, 2)
        hydro.lengthening_factor = ctx.arg_float(2)
        if ctx.num_args > 3:
            hydro.options = ctx.arg_str(3)
        hydro.inertia = self._parse_optional_inertia(ctx, 4)

        self.current_module.hydros.append(hydro)

    def _parse_commands(self, ctx: LineContext) -> None:
        """'commands' and 'commands2'; the former has one rate for both directions."""
        is_commands2 = self.current_block == Keyword.COMMANDS2
        min_args = 8 if is_commands2 else 7
        if not self._check_num_args(ctx.num_args, min_args):
            return

        command = Command2(
            format_version=2 if is_commands2 else 1,
            beam_defaults=self.defaults.beam,
            inertia_defaults=self.defaults.inertia,
            detacher_group=self.defaults.detacher_group,
        )
        command.nodes = self._arg_nodes(ctx, 0, 2)
        command.shorten_rate = ctx.arg_float(2)
        pos = 3
        if is_commands2:
            command.lengthen_rate = ctx.arg_float(pos)
            pos += 1
        else:
            command.lengthen_rate = command.shorten_rate
        command.max_contraction = ctx.arg_float(pos)
        command.max_extension = ctx.arg_float(pos + 1)
        command.contract_key = ctx.arg_int(pos + 2)
        command.extend_key = ctx.arg_int(pos + 3)
        pos += 4

        if ctx.num_args <= min_args:
            self.current_module.commands2.append(command)
            return

        self._parse_command_options(command, ctx.arg_str(pos))
        pos += 1

        if ctx.num_args > pos:
            command.description = ctx.arg_str(pos)
            pos += 1
        if ctx.num_args > pos:
            command.inertia = self._parse_optional_inertia(ctx, pos)
            pos += 4
        if ctx.num_args > pos:
            command.affect_engine = ctx.arg_float(pos)
            pos += 1
        if ctx.num_args > pos:
            command.needs_engine = ctx.arg_bool(pos)
            pos += 1
        if ctx.num_args > pos:
            command.plays_sound = ctx.arg_bool(pos)

        self.current_module.commands2.append(command)

    def _parse_command_options(self, command: Command2, options_str: str) -> None:
        # The first of 'o', 'p' and 'c' wins; the others conflict with it
        winner = ""
        for c in options_str:
            if not winner and c in "opc":
                winner = c
            if c == "n":
                continue
            elif c == "i":
                command.option_i_invisible = True
            elif c == "r":
                command.option_r_rope = True
            elif c == "f":
                command.option_f_not_faster = True
            elif c == "c":
                command.option_c_auto_center = True
            elif c == "p":
                command.option_p_1press = True
            elif c == "o":
                command.option_o_1press_center = True
            else:
                self.diagnostics.warning(ErrorKind.UNKNOWN_OPTION, f"ignoring unknown flag '{c}'")

        if command.option_c_auto_center and winner not in ("c", ""):
            self.diagnostics.warning(
                ErrorKind.INVALID_VALUE,
                "Command cannot be one-pressed and self centering at the same time, ignoring flag 'c'")
            command.option_c_auto_center = False

        ignored = ""
        if command.option_o_1press_center and winner not in ("o", ""):
            command.option_o_1press_center = False
            ignored = "o"
        elif command.option_p_1press and winner not in ("p", ""):
            command.option_p_1press = False
            ignored = "p"

        if ignored and winner == "c":
            self.diagnostics.warning(
                ErrorKind.INVALID_VALUE,
                f"Command cannot be one-pressed and self centering at the same time, ignoring flag '{ignored}'")
        elif ignored and winner in ("o", "p"):
            self.diagnostics.warning(
                ErrorKind.INVALID_VALUE,
                f"Command already has a one-pressed c.mode, ignoring flag '{ignored}'")

    def _parse_rotators(self, ctx: LineContext) -> None:
        is_rotators2 = self.current_block == Keyword.ROTATORS2
        if not self._check_num_args(ctx.num_args, 16 if is_rotators2 else 13):
            return

        rotator = Rotator2() if is_rotators2 else Rotator()
        rotator.inertia_defaults = self.defaults.inertia
        rotator.axis_nodes = self._arg_nodes(ctx, 0, 2)
        rotator.base_plate_nodes = self._arg_nodes(ctx, 2, 4)
        rotator.rotating_plate_nodes = self._arg_nodes(ctx, 6, 4)
        rotator.rate = ctx.arg_float(10)
        rotator.spin_left_key = ctx.arg_int(11)
        rotator.spin_right_key = ctx.arg_int(12)

        offset = 0
        if is_rotators2:
            rotator.rotating_force = ctx.arg_float(13)
            rotator.tolerance = ctx.arg_float(14)
            rotator.description = ctx.arg_str(15)
            offset = 3

        rotator.inertia = self._parse_optional_inertia(ctx, 13 + offset)
        if ctx.num_args > 17 + offset:
            rotator.engine_coupling = ctx.arg_float(17 + offset)
        if ctx.num_args > 18 + offset:
            rotator.needs_engine = ctx.arg_bool(18 + offset)

        if is_rotators2:
            self.current_module.rotators2.append(rotator)
        else:
            self.current_module.rotators.append(rotator)

    def _parse_triggers(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 6):
            return

        trigger = Trigger(beam_defaults=self.defaults.beam, detacher_group=self.defaults.detacher_group)
        trigger.nodes = self._arg_nodes(ctx, 0, 2)
        trigger.contraction_trigger_limit = ctx.arg_float(2)
        trigger.expansion_trigger_limit = ctx.arg_float(3)
        shortbound_action = ctx.arg_int(4)
        longbound_action = ctx.arg_int(5)

        if ctx.num_args > 6:
            trigger.options = self._fold_options(ctx.arg_str(6), _TRIGGER_OPTIONS, TriggerOption.NONE)
        if ctx.num_args > 7:
            boundary_timer = ctx.arg_float(7)
            if boundary_timer > 0.0:
                trigger.boundary_timer = boundary_timer

        if trigger.is_hook_toggle_trigger():
            trigger.action = HookToggleTrigger(shortbound_action, longbound_action)
        elif trigger.is_engine_trigger():
            trigger.action = EngineTrigger(function=shortbound_action, motor_index=longbound_action)
        else:
            trigger.action = CommandKeyTrigger(shortbound_action, longbound_action)

        self.current_module.triggers.append(trigger)

    def _parse_animators(self, ctx: LineContext) -> None:
        args = split_list(ctx.line, ",")
        if not self._check_num_args(len(args), 4):
            return

        animator = Animator(
            inertia_defaults=self.defaults.inertia,
            beam_defaults=self.defaults.beam,
            detacher_group=self.defaults.detacher_group,
        )
        animator.nodes = [self._parse_node_ref(args[0]), self._parse_node_ref(args[1])]
        animator.lengthening_factor = self._parse_float_token(args[2])

        for token in (t.strip() for t in split_list(args[3], "|")):
            m = _ANIMATOR_NUMBERED_RE.fullmatch(token)
            if m:
                animator.aero_animator.flags |= _AERO_ANIMATOR_OPTIONS[m.group(1)]
                animator.aero_animator.engine_idx = int(m.group(2)) - 1
            elif token.startswith(("shortlimit", "longlimit")):
                fields = split_list(token, ":")
                if len(fields) > 1:
                    limit = to_float(fields[1]) or 0.0
                    if token.startswith("shortlimit"):
                        animator.short_limit = limit
                        animator.flags |= AnimatorOption.SHORT_LIMIT
                    else:
                        animator.long_limit = limit
                        animator.flags |= AnimatorOption.LONG_LIMIT
            elif token in _ANIMATOR_OPTIONS:
                animator.flags |= _ANIMATOR_OPTIONS[token]
            else:
                self.diagnostics.warning(ErrorKind.UNKNOWN_OPTION, f"ignoring invalid option '{token}'")

        self.current_module.animators.append(animator)

    def _parse_hooks(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 1):
            return

        hook = Hook(node=self._arg_node(ctx, 0))
        i = 1
        while i < ctx.num_args:
            attr = ctx.arg_str(i).strip()
            has_value = i < ctx.num_args - 1
            if has_value and attr in _HOOK_VALUE_OPTIONS:
                name, kind = _HOOK_VALUE_OPTIONS[attr]
                i += 1
                setattr(hook, name, ctx.arg_float(i) if kind is float else ctx.arg_int(i))
            elif attr in _HOOK_FLAG_OPTIONS:
                setattr(hook, _HOOK_FLAG_OPTIONS[attr], True)
            else:
                self.diagnostics.warning(ErrorKind.UNKNOWN_OPTION, f"ignoring invalid option '{attr}'")
            i += 1

        self.current_module.hooks.append(hook)

    def _parse_ties(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 5):
            return

        tie = Tie(beam_defaults=self.defaults.beam, detacher_group=self.defaults.detacher_group)
        tie.root_node = self._arg_node(ctx, 0)
        tie.max_reach_length = ctx.arg_float(1)
        tie.auto_shorten_rate = ctx.arg_float(2)
        tie.min_length = ctx.arg_float(3)
        tie.max_length = ctx.arg_float(4)

        if ctx.num_args > 5:
            for c in ctx.arg_str(5):
                if c in "nv":
                    continue
                elif c == "i":
                    tie.is_invisible = True
                elif c == "s":
                    tie.disable_self_lock = True
                else:
                    self.diagnostics.warning(ErrorKind.UNKNOWN_OPTION, f"ignoring invalid option '{c}'")
        if ctx.num_args > 6:
            tie.max_stress = ctx.arg_float(6)
        if ctx.num_args > 7:
            tie.group = ctx.arg_int(7)

        self.current_module.ties.append(tie)

    def _parse_ropes(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        rope = Rope(beam_defaults=self.defaults.beam, detacher_group=self.defaults.detacher_group)
        rope.root_node = self._arg_node(ctx, 0)
        rope.end_node = self._arg_node(ctx, 1)
        if ctx.num_args > 2:
            rope.invisible = ctx.arg_char(2) == "i"

        self.current_module.ropes.append(rope)

    def _parse_ropables(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 1):
            return

        ropable = Ropable(node=self._arg_node(ctx, 0))
        if ctx.num_args > 1:
            ropable.group = ctx.arg_int(1)
        if ctx.num_args > 2:
            ropable.has_multilock = ctx.arg_int(2) == 1

        self.current_module.ropables.append(ropable)

    # --------------------------
    # Sections: cameras and meshes
    # --------------------------

    def _parse_cinecam(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 11):
            return

        cinecam = Cinecam(node_defaults=self.defaults.node, beam_defaults=self.defaults.beam)
        cinecam.position = self._arg_vec3(ctx, 0)
        cinecam.nodes = self._arg_nodes(ctx, 3, 8)
        if ctx.num_args > 11:
            cinecam.spring = ctx.arg_float(11)
        if ctx.num_args > 12:
            cinecam.damping = ctx.arg_float(12)
        if ctx.num_args > 13:
            # Garbage such as a trailing pseudo-comment parses as 0
            node_mass = ctx.arg_float(13)
            if node_mass > 0.0:
                cinecam.node_mass = node_mass

        if self.importer.enabled:
            self.importer.add_generated_node(Keyword.CINECAM, cinecam)
        self.current_module.cinecam.append(cinecam)

    def _parse_cameras(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 3):
            return
        center, back, left = self._arg_nodes(ctx, 0, 3)
        self.current_module.cameras.append(Camera(center_node=center, back_node=back, left_node=left))

    def _parse_camerarail(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 1):
            return
        self.staged_camera_rail.nodes.append(self._arg_node(ctx, 0))

    def _parse_videocamera(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 19):
            return

        cam = VideoCamera()
        cam.reference_node = self._arg_node(ctx, 0)
        cam.left_node = self._arg_node(ctx, 1)
        cam.bottom_node = self._arg_node(ctx, 2)
        cam.alt_reference_node = self._arg_nullable_node(ctx, 3)
        cam.alt_orientation_node = self._arg_nullable_node(ctx, 4)
        cam.offset = self._arg_vec3(ctx, 5)
        cam.rotation = self._arg_vec3(ctx, 8)
        cam.field_of_view = ctx.arg_float(11)
        cam.texture_width = ctx.arg_int(12)
        cam.texture_height = ctx.arg_int(13)
        cam.min_clip_distance = ctx.arg_float(14)
        cam.max_clip_distance = ctx.arg_float(15)
        cam.camera_role = ctx.arg_int(16)
        cam.camera_mode = ctx.arg_int(17)
        cam.material_name = ctx.arg_str(18)
        if ctx.num_args > 19:
            cam.camera_name = ctx.arg_str(19)

        self.current_module.videocameras.append(cam)

    def _staged_submesh_or_error(self) -> Submesh | None:
        if self.staged_submesh is None:
            self.diagnostics.error(ErrorKind.STRUCTURAL, "must come after 'submesh', skipping line")
        return self.staged_submesh

    def _parse_cab(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 3):
            return
        submesh = self._staged_submesh_or_error()
        if submesh is None:
            return

        cab = Cab(nodes=self._arg_nodes(ctx, 0, 3))
        if ctx.num_args > 3:
            cab.options = self._fold_options(ctx.arg_str(3), _CAB_OPTIONS, CabOption.NONE)

        submesh.cab_triangles.append(cab)

    def _parse_texcoords(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 3):
            return
        submesh = self._staged_submesh_or_error()
        if submesh is None:
            return
        submesh.texcoords.append(Texcoord(node=self._arg_node(ctx, 0), u=ctx.arg_float(1), v=ctx.arg_float(2)))

    def _parse_flexbodies(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 10):
            return

        flexbody = Flexbody()
        flexbody.reference_node, flexbody.x_axis_node, flexbody.y_axis_node = self._arg_nodes(ctx, 0, 3)
        flexbody.offset = self._arg_vec3(ctx, 3)
        flexbody.rotation = self._arg_vec3(ctx, 6)
        flexbody.mesh_name = ctx.arg_str(9)

        self.current_module.flexbodies.append(flexbody)

    def _parse_props(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 10):
            return

        prop = Prop()
        prop.reference_node, prop.x_axis_node, prop.y_axis_node = self._arg_nodes(ctx, 0, 3)
        prop.offset = self._arg_vec3(ctx, 3)
        prop.rotation = self._arg_vec3(ctx, 6)
        prop.mesh_name = ctx.arg_str(9)
        prop.special = self._identify_special_prop(prop.mesh_name)

        if prop.special == PropSpecial.BEACON and ctx.num_args >= 14:
            prop.beacon = BeaconProp(
                flare_material_name=ctx.arg_str(10).strip(),
                color=(ctx.arg_float(11), ctx.arg_float(12), ctx.arg_float(13)),
            )
        elif prop.special in (PropSpecial.DASHBOARD_LEFT, PropSpecial.DASHBOARD_RIGHT):
            dashboard = DashboardProp()
            if ctx.num_args > 10:
                dashboard.mesh_name = ctx.arg_str(10)
            if ctx.num_args > 13:
                dashboard.offset = self._arg_vec3(ctx, 11)
                dashboard.offset_is_set = True
            if ctx.num_args > 14:
                dashboard.rotation_angle = ctx.arg_float(14)
            prop.dashboard = dashboard

        self.current_module.props.append(prop)

    @staticmethod
    def _identify_special_prop(mesh_name: str) -> PropSpecial:
        for needle, special in _PROP_SPECIAL_SUBSTRINGS:
            if needle in mesh_name:
                return special
        for prefix, special in _PROP_SPECIAL_PREFIXES:
            if mesh_name.startswith(prefix):
                return special
        return PropSpecial.NONE

    def _parse_managedmaterials(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        material = ManagedMaterial(name=ctx.arg_str(0), options=self.defaults.managed_materials)
        type_str = ctx.arg_str(1)
        material_type = _MANAGED_MATERIAL_TYPES.get(type_str)
        if material_type is None:
            self.diagnostics.warning(ErrorKind.INVALID_VALUE, f"{type_str} is an unknown effect")
            return
        if not self._check_num_args(ctx.num_args, 3):
            return

        material.type = material_type
        material.diffuse_map = ctx.arg_str(2)
        if material_type in (ManagedMaterialType.MESH_STANDARD, ManagedMaterialType.MESH_TRANSPARENT):
            if ctx.num_args > 3:
                material.specular_map = self._arg_managed_tex(ctx, 3)
        else:
            if ctx.num_args > 3:
                material.damaged_diffuse_map = self._arg_managed_tex(ctx, 3)
            if ctx.num_args > 4:
                material.specular_map = self._arg_managed_tex(ctx, 4)

        if not self._texture_exists(material.diffuse_map):
            self.diagnostics.warning(ErrorKind.RESOURCE_MISSING, f"Missing texture file: {material.diffuse_map}")
            return
        if material.damaged_diffuse_map and not self._texture_exists(material.damaged_diffuse_map):
            self.diagnostics.warning(ErrorKind.RESOURCE_MISSING,
                                     f"Missing texture file: {material.damaged_diffuse_map}")
            material.damaged_diffuse_map = ""
        if material.specular_map and not self._texture_exists(material.specular_map):
            self.diagnostics.warning(ErrorKind.RESOURCE_MISSING, f"Missing texture file: {material.specular_map}")
            material.specular_map = ""

        self.current_module.managedmaterials.append(material)

    def _texture_exists(self, name: str) -> bool:
        if self.options.resource_exists is None:
            return True
        return bool(self.options.resource_exists(self.options.resource_group, name))

    def _parse_materialflarebindings(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.current_module.materialflarebindings.append(
            MaterialFlareBinding(flare_number=ctx.arg_int(0), material_name=ctx.arg_str(1)))

    # --------------------------
    # Sections: aero
    # --------------------------

    def _parse_airbrakes(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 14):
            return

        airbrake = Airbrake()
        (airbrake.reference_node, airbrake.x_axis_node,
         airbrake.y_axis_node, airbrake.additional_node) = self._arg_nodes(ctx, 0, 4)
        airbrake.offset = self._arg_vec3(ctx, 4)
        airbrake.width = ctx.arg_float(7)
        airbrake.height = ctx.arg_float(8)
        airbrake.max_inclination_angle = ctx.arg_float(9)
        airbrake.texcoord_x1 = ctx.arg_float(10)
        airbrake.texcoord_y1 = ctx.arg_float(11)
        airbrake.texcoord_x2 = ctx.arg_float(12)
        airbrake.texcoord_y2 = ctx.arg_float(13)

        self.current_module.airbrakes.append(airbrake)

    def _parse_wings(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 16):
            return

        wing = Wing(nodes=self._arg_nodes(ctx, 0, 8), tex_coords=[ctx.arg_float(i) for i in range(8, 16)])
        if ctx.num_args > 16:
            wing.control_surface = self._arg_wing_surface(ctx, 16)
        if ctx.num_args > 17:
            wing.chord_point = ctx.arg_float(17)
        if ctx.num_args > 18:
            wing.min_deflection = ctx.arg_float(18)
        if ctx.num_args > 19:
            wing.max_deflection = ctx.arg_float(19)
        if ctx.num_args > 20:
            wing.airfoil = ctx.arg_str(20)
        if ctx.num_args > 21:
            wing.efficacy_coef = ctx.arg_float(21)

        self.current_module.wings.append(wing)

    def _parse_fusedrag(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 3):
            return

        fusedrag = Fusedrag(front_node=self._arg_node(ctx, 0), rear_node=self._arg_node(ctx, 1))
        if ctx.arg_str(2) == "autocalc":
            fusedrag.autocalc = True
            if ctx.num_args > 3:
                fusedrag.area_coefficient = ctx.arg_float(3)
            if ctx.num_args > 4:
                fusedrag.airfoil_name = ctx.arg_str(4)
        else:
            fusedrag.approximate_width = ctx.arg_float(2)
            if ctx.num_args > 3:
                fusedrag.airfoil_name = ctx.arg_str(3)

        self.current_module.fusedrag.append(fusedrag)

    def _parse_turboprops(self, ctx: LineContext) -> None:
        is_turboprops2 = self.current_block == Keyword.TURBOPROPS2
        if not self._check_num_args(ctx.num_args, 9 if is_turboprops2 else 8):
            return

        turboprop = Turboprop2(reference_node=self._arg_node(ctx, 0), axis_node=self._arg_node(ctx, 1))
        turboprop.blade_tip_nodes = [
            self._arg_node(ctx, 2),
            self._arg_node(ctx, 3),
            self._arg_nullable_node(ctx, 4),
            self._arg_nullable_node(ctx, 5),
        ]
        offset = 0
        if is_turboprops2:
            turboprop.couple_node = self._arg_nullable_node(ctx, 6)
            offset = 1
        turboprop.turbine_power_kw = ctx.arg_float(6 + offset)
        turboprop.airfoil = ctx.arg_str(7 + offset)

        self.current_module.turboprops2.append(turboprop)

    def _parse_pistonprops(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 10):
            return

        pistonprop = Pistonprop(reference_node=self._arg_node(ctx, 0), axis_node=self._arg_node(ctx, 1))
        pistonprop.blade_tip_nodes = [
            self._arg_node(ctx, 2),
            self._arg_node(ctx, 3),
            self._arg_nullable_node(ctx, 4),
            self._arg_nullable_node(ctx, 5),
        ]
        pistonprop.couple_node = self._arg_nullable_node(ctx, 6)
        pistonprop.turbine_power_kw = ctx.arg_float(7)
        pistonprop.pitch = ctx.arg_float(8)
        pistonprop.airfoil = ctx.arg_str(9)

        self.current_module.pistonprops.append(pistonprop)

    def _parse_turbojets(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 9):
            return

        turbojet = Turbojet()
        turbojet.front_node, turbojet.back_node, turbojet.side_node = self._arg_nodes(ctx, 0, 3)
        turbojet.is_reversable = ctx.arg_int(3)
        turbojet.dry_thrust = ctx.arg_float(4)
        turbojet.wet_thrust = ctx.arg_float(5)
        turbojet.front_diameter = ctx.arg_float(6)
        turbojet.back_diameter = ctx.arg_float(7)
        turbojet.nozzle_length = ctx.arg_float(8)

        self.current_module.turbojets.append(turbojet)

    def _parse_screwprops(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 4):
            return

        screwprop = Screwprop(power=ctx.arg_float(3))
        screwprop.prop_node, screwprop.back_node, screwprop.top_node = self._arg_nodes(ctx, 0, 3)

        self.current_module.screwprops.append(screwprop)

    # --------------------------
    # Sections: drivetrain
    # --------------------------

    def _parse_engine(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 6):
            return

        engine = Engine(
            shift_down_rpm=ctx.arg_float(0),
            shift_up_rpm=ctx.arg_float(1),
            torque=ctx.arg_float(2),
            global_gear_ratio=ctx.arg_float(3),
            reverse_gear_ratio=ctx.arg_float(4),
            neutral_gear_ratio=ctx.arg_float(5),
        )
        for i in range(6, ctx.num_args):
            ratio = ctx.arg_float(i)
            if ratio < 0.0:
                break  # terminator
            engine.gear_ratios.append(ratio)

        if not engine.gear_ratios:
            self.diagnostics.error(ErrorKind.INVALID_VALUE, "no forward gear")
            return

        self.current_module.engine.append(engine)

    def _parse_engoption(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 1):
            return

        engoption = Engoption(inertia=ctx.arg_float(0))
        if ctx.num_args > 1:
            engoption.type = ctx.arg_char(1)
        for i, name in enumerate(("clutch_force", "shift_time", "clutch_time", "post_shift_time", "stall_rpm",
                                  "idle_rpm", "max_idle_mixture", "min_idle_mixture", "braking_torque"), start=2):
            if ctx.num_args > i:
                setattr(engoption, name, ctx.arg_float(i))

        self.current_module.engoption.append(engoption)

    def _parse_engturbo(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 4):
            return

        engturbo = Engturbo(version=ctx.arg_int(0), tinertia_factor=ctx.arg_float(1), nturbos=ctx.arg_int(2))
        engturbo.params = [ctx.arg_float(i) for i in range(3, min(ctx.num_args, 14))]
        if engturbo.nturbos > _MAX_TURBOS:
            self.diagnostics.warning(ErrorKind.INVALID_VALUE,
                                     "You cannot have more than 4 turbos. Fallback: using 4 instead.")
            engturbo.nturbos = _MAX_TURBOS

        self.current_module.engturbo.append(engturbo)

    def _parse_torquecurve(self, ctx: LineContext) -> None:
        args = [a.strip() for a in split_list(ctx.line, ",")]
        if len(args) > 2:
            self.diagnostics.error(ErrorKind.ARGUMENT_COUNT, "too many arguments, skipping")
            return
        if not args:
            return

        if not self.current_module.torquecurve:
            self.current_module.torquecurve.append(TorqueCurve())
        curve = self.current_module.torquecurve[0]
        if len(args) == 1:
            curve.predefined_func_name = args[0]
        elif len(args) == 2:
            curve.samples.append(TorqueCurveSample(
                power=self._parse_float_token(args[0]),
                torque_percent=self._parse_float_token(args[1]),
            ))

    def _parse_axles(self, ctx: LineContext) -> None:
        axle = Axle()
        for token in split_list(ctx.line, ","):
            m = _AXLE_PROPERTY_RE.fullmatch(token)
            if not m:
                self.diagnostics.error(ErrorKind.INVALID_VALUE, "Invalid property, ignoring whole line...")
                return
            if m.group(1):
                wheel_index = int(m.group(1)) - 1
                axle.wheels[wheel_index] = [self._parse_node_ref(m.group(2)), self._parse_node_ref(m.group(3))]
            else:
                axle.options.extend(self._parse_differential_types(m.group(4)))

        self.current_module.axles.append(axle)

    def _parse_interaxles(self, ctx: LineContext) -> None:
        args = split_list(ctx.line, ",")
        if not self._check_num_args(len(args), 3):
            return

        interaxle = InterAxle(a1=self._parse_int_token(args[0]) - 1, a2=self._parse_int_token(args[1]) - 1)
        m = _AXLE_PROPERTY_RE.fullmatch(args[2])
        if not m:
            self.diagnostics.error(ErrorKind.INVALID_VALUE, "Invalid property, ignoring whole line...")
            return
        if m.group(4) is not None:
            interaxle.options = self._parse_differential_types(m.group(4))

        self.current_module.interaxles.append(interaxle)

    def _parse_transfercase(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        tc = TransferCase(a1=ctx.arg_int(0) - 1, a2=ctx.arg_int(1) - 1)
        if ctx.num_args > 2:
            tc.has_2wd = bool(ctx.arg_int(2))
        if ctx.num_args > 3:
            tc.has_2wd_lo = bool(ctx.arg_int(3))
        tc.gear_ratios = [ctx.arg_float(i) for i in range(4, ctx.num_args)]

        self.current_module.transfercase.append(tc)

    def _parse_brakes(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 1):
            return

        brakes = Brakes(default_braking_force=ctx.arg_float(0))
        if ctx.num_args > 1:
            brakes.parking_brake_force = ctx.arg_float(1)

        self.current_module.brakes.append(brakes)

    # --------------------------
    # Sections: effects, sound, misc
    # --------------------------

    def _parse_exhausts(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return

        exhaust = Exhaust(reference_node=self._arg_node(ctx, 0), direction_node=self._arg_node(ctx, 1))
        # Argument [2] is unused
        if ctx.num_args > 3:
            exhaust.particle_name = ctx.arg_str(3)

        self.current_module.exhausts.append(exhaust)

    def _parse_particles(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 3):
            return
        self.current_module.particles.append(Particle(
            emitter_node=self._arg_node(ctx, 0),
            reference_node=self._arg_node(ctx, 1),
            particle_system_name=ctx.arg_str(2),
        ))

    def _parse_flares(self, ctx: LineContext) -> None:
        """'flares' and 'flares2'; only the latter gives the Z offset."""
        is_flares2 = self.current_block == Keyword.FLARES2
        if not self._check_num_args(ctx.num_args, 6 if is_flares2 else 5):
            return

        flare = Flare2()
        flare.reference_node, flare.node_axis_x, flare.node_axis_y = self._arg_nodes(ctx, 0, 3)
        if is_flares2:
            flare.offset = self._arg_vec3(ctx, 3)
            pos = 6
        else:
            flare.offset = replace(flare.offset, x=ctx.arg_float(3), y=ctx.arg_float(4))
            pos = 5

        if ctx.num_args > pos:
            flare.type = self._arg_flare_type(ctx, pos)
            pos += 1
        if ctx.num_args > pos:
            if flare.type == FlareType.USER:
                flare.control_number = ctx.arg_int(pos)
            elif flare.type == FlareType.DASHBOARD:
                flare.dashboard_link = ctx.arg_str(pos)
            pos += 1
        if ctx.num_args > pos:
            flare.blink_delay_milis = ctx.arg_int(pos)
            pos += 1
        if ctx.num_args > pos:
            flare.size = ctx.arg_float(pos)
            pos += 1
        if ctx.num_args > pos:
            flare.material_name = ctx.arg_str(pos)

        self.current_module.flares2.append(flare)

    def _parse_soundsources(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.current_module.soundsources.append(
            SoundSource(node=self._arg_node(ctx, 0), sound_script_name=ctx.arg_str(1)))

    def _parse_soundsources2(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 3):
            return

        soundsource = SoundSource2(node=self._arg_node(ctx, 0), sound_script_name=ctx.arg_str(2))
        mode = ctx.arg_int(1)
        if mode < 0:
            if mode < -2:
                self.diagnostics.error(ErrorKind.INVALID_VALUE, f"invalid mode {mode}, falling back to default -2")
                mode = -2
            soundsource.mode = CameraMode(mode)
        else:
            soundsource.mode = CameraMode.CINECAM
            soundsource.cinecam_index = mode

        self.current_module.soundsources2.append(soundsource)

    def _parse_guisettings(self, ctx: LineContext) -> None:
        if not self._check_num_args(ctx.num_args, 2):
            return
        self.current_module.guisettings.append(GuiSettings(key=ctx.arg_str(0), value=ctx.arg_str(1)))

    def _parse_help(self, ctx: LineContext) -> None:
        self.current_module.help.append(Help(material=ctx.line))

    def _parse_description(self, ctx: LineContext) -> None:
        self.current_module.description.append(ctx.line)

    # --------------------------
    # Dispatch tables
    # --------------------------

    _DIRECTIVE_HANDLERS: dict[Keyword, Callable[["RigParser", LineContext], None]] = {
        Keyword.ADD_ANIMATION: _parse_directive_add_animation,
        Keyword.ANTILOCKBRAKES: _parse_directive_antilockbrakes,
        Keyword.AUTHOR: _parse_directive_author,
        Keyword.BACKMESH: _parse_directive_backmesh,
        Keyword.CRUISECONTROL: _parse_directive_cruisecontrol,
        Keyword.DETACHER_GROUP: _parse_directive_detacher_group,
        Keyword.EXTCAMERA: _parse_directive_extcamera,
        Keyword.FILEFORMATVERSION: _parse_directive_fileformatversion,
        Keyword.FILEINFO: _parse_directive_fileinfo,
        Keyword.FLEXBODY_CAMERA_MODE: _parse_directive_flexbody_camera_mode,
        Keyword.FORSET: _parse_directive_forset,
        Keyword.GUID: _parse_directive_guid,
        Keyword.PROP_CAMERA_MODE: _parse_directive_prop_camera_mode,
        Keyword.SET_BEAM_DEFAULTS: _parse_directive_set_beam_defaults,
        Keyword.SET_BEAM_DEFAULTS_SCALE: _parse_directive_set_beam_defaults_scale,
        Keyword.SET_COLLISION_RANGE: _parse_directive_set_collision_range,
        Keyword.SET_DEFAULT_MINIMASS: _parse_directive_set_default_minimass,
        Keyword.SET_INERTIA_DEFAULTS: _parse_directive_set_inertia_defaults,
        Keyword.SET_MANAGEDMATERIALS_OPTIONS: _parse_directive_set_managedmaterials_options,
        Keyword.SET_NODE_DEFAULTS: _parse_directive_set_node_defaults,
        Keyword.SET_SKELETON_SETTINGS: _parse_directive_set_skeleton_settings,
        Keyword.SPEEDLIMITER: _parse_directive_speedlimiter,
        Keyword.SUBMESH: _parse_directive_submesh,
        Keyword.SUBMESH_GROUNDMODEL: _parse_directive_submesh_groundmodel,
        Keyword.TRACTIONCONTROL: _parse_directive_tractioncontrol,
    }

    _SECTION_HANDLERS: dict[Keyword, Callable[["RigParser", LineContext], None]] = {
        Keyword.AIRBRAKES: _parse_airbrakes,
        Keyword.ANIMATORS: _parse_animators,
        Keyword.AXLES: _parse_axles,
        Keyword.BEAMS: _parse_beams,
        Keyword.BRAKES: _parse_brakes,
        Keyword.CAB: _parse_cab,
        Keyword.CAMERARAIL: _parse_camerarail,
        Keyword.CAMERAS: _parse_cameras,
        Keyword.CINECAM: _parse_cinecam,
        Keyword.COLLISIONBOXES: _parse_collisionboxes,
        Keyword.COMMANDS: _parse_commands,
        Keyword.COMMANDS2: _parse_commands,
        Keyword.CONTACTERS: _parse_contacters,
        Keyword.DESCRIPTION: _parse_description,
        Keyword.ENGINE: _parse_engine,
        Keyword.ENGOPTION: _parse_engoption,
        Keyword.ENGTURBO: _parse_engturbo,
        Keyword.EXHAUSTS: _parse_exhausts,
        Keyword.FIXES: _parse_fixes,
        Keyword.FLARES: _parse_flares,
        Keyword.FLARES2: _parse_flares,
        Keyword.FLEXBODIES: _parse_flexbodies,
        Keyword.FLEXBODYWHEELS: _parse_flexbodywheels,
        Keyword.FUSEDRAG: _parse_fusedrag,
        Keyword.GLOBALS: _parse_globals,
        Keyword.GUISETTINGS: _parse_guisettings,
        Keyword.HELP: _parse_help,
        Keyword.HOOKS: _parse_hooks,
        Keyword.HYDROS: _parse_hydros,
        Keyword.INTERAXLES: _parse_interaxles,
        Keyword.LOCKGROUPS: _parse_lockgroups,
        Keyword.MANAGEDMATERIALS: _parse_managedmaterials,
        Keyword.MATERIALFLAREBINDINGS: _parse_materialflarebindings,
        Keyword.MESHWHEELS: _parse_meshwheels,
        Keyword.MESHWHEELS2: _parse_meshwheels,
        Keyword.MINIMASS: _parse_minimass,
        Keyword.NODES: _parse_nodes,
        Keyword.NODES2: _parse_nodes,
        Keyword.PARTICLES: _parse_particles,
        Keyword.PISTONPROPS: _parse_pistonprops,
        Keyword.PROPS: _parse_props,
        Keyword.RAILGROUPS: _parse_railgroups,
        Keyword.ROPABLES: _parse_ropables,
        Keyword.ROPES: _parse_ropes,
        Keyword.ROTATORS: _parse_rotators,
        Keyword.ROTATORS2: _parse_rotators,
        Keyword.SCREWPROPS: _parse_screwprops,
        Keyword.SHOCKS: _parse_shocks,
        Keyword.SHOCKS2: _parse_shocks2,
        Keyword.SHOCKS3: _parse_shocks3,
        Keyword.SLIDENODES: _parse_slidenodes,
        Keyword.SOUNDSOURCES: _parse_soundsources,
        Keyword.SOUNDSOURCES2: _parse_soundsources2,
        Keyword.TEXCOORDS: _parse_texcoords,
        Keyword.TIES: _parse_ties,
        Keyword.TORQUECURVE: _parse_torquecurve,
        Keyword.TRANSFERCASE: _parse_transfercase,
        Keyword.TRIGGERS: _parse_triggers,
        Keyword.TURBOJETS: _parse_turbojets,
        Keyword.TURBOPROPS: _parse_turboprops,
        Keyword.TURBOPROPS2: _parse_turboprops,
        Keyword.VIDEOCAMERA: _parse_videocamera,
        Keyword.WHEELDETACHERS: _parse_wheeldetachers,
        Keyword.WHEELS: _parse_wheels,
        Keyword.WHEELS2: _parse_wheels2,
        Keyword.WINGS: _parse_wings,
    }
