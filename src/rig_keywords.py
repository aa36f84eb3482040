"""
Line layer of the truck file parser: sanitizing, tokenizing and keyword lookup.

The format is line oriented; every line is either a comment, a keyword
(optionally followed by arguments) or a data line belonging to the currently
open section.

Usage:
    line = sanitize_line(raw)
    if line is not None:
        spans = tokenize_line(line)
        keyword = identify_keyword(line)
"""

from __future__ import annotations
from enum import Enum
import codecs
import re

from .config import LINE_BUFFER_LENGTH, LINE_MAX_ARGS


# --------------------------
# Keyword table
# --------------------------

class KeywordKind(Enum):
    FLAG = "flag"             # no arguments, sets a document-wide flag
    DIRECTIVE = "directive"   # processed immediately, does not open a section
    SECTION = "section"       # opens a section; following data lines belong to it
    END = "end"               # closes the current section
    MODULE = "module"         # switches the active module
    IGNORED = "ignored"       # obsolete, silently skipped


class Keyword(Enum):
    """All keywords of the format. Values are the canonical spellings."""
    ADD_ANIMATION = "add_animation"
    AIRBRAKES = "airbrakes"
    ANIMATORS = "animators"
    ANTILOCKBRAKES = "AntiLockBrakes"
    AUTHOR = "author"
    AXLES = "axles"
    BACKMESH = "backmesh"
    BEAMS = "beams"
    BRAKES = "brakes"
    CAB = "cab"
    CAMERARAIL = "camerarail"
    CAMERAS = "cameras"
    CINECAM = "cinecam"
    COLLISIONBOXES = "collisionboxes"
    COMMANDS = "commands"
    COMMANDS2 = "commands2"
    COMMENT = "comment"
    CONTACTERS = "contacters"
    CRUISECONTROL = "cruisecontrol"
    DESCRIPTION = "description"
    DETACHER_GROUP = "detacher_group"
    DISABLEDEFAULTSOUNDS = "disabledefaultsounds"
    ENABLE_ADVANCED_DEFORMATION = "enable_advanced_deformation"
    END = "end"
    END_COMMENT = "end_comment"
    END_DESCRIPTION = "end_description"
    END_SECTION = "end_section"
    ENGINE = "engine"
    ENGOPTION = "engoption"
    ENGTURBO = "engturbo"
    ENVMAP = "envmap"
    EXHAUSTS = "exhausts"
    EXTCAMERA = "extcamera"
    FILEFORMATVERSION = "fileformatversion"
    FILEINFO = "fileinfo"
    FIXES = "fixes"
    FLARES = "flares"
    FLARES2 = "flares2"
    FLEXBODIES = "flexbodies"
    FLEXBODY_CAMERA_MODE = "flexbody_camera_mode"
    FLEXBODYWHEELS = "flexbodywheels"
    FORSET = "forset"
    FORWARDCOMMANDS = "forwardcommands"
    FUSEDRAG = "fusedrag"
    GLOBALS = "globals"
    GUID = "guid"
    GUISETTINGS = "guisettings"
    HELP = "help"
    HIDEINCHOOSER = "hideInChooser"
    HOOKGROUP = "hookgroup"
    HOOKS = "hooks"
    HYDROS = "hydros"
    IMPORTCOMMANDS = "importcommands"
    INTERAXLES = "interaxles"
    LOCKGROUPS = "lockgroups"
    LOCKGROUP_DEFAULT_NOLOCK = "lockgroup_default_nolock"
    MANAGEDMATERIALS = "managedmaterials"
    MATERIALFLAREBINDINGS = "materialflarebindings"
    MESHWHEELS = "meshwheels"
    MESHWHEELS2 = "meshwheels2"
    MINIMASS = "minimass"
    NODECOLLISION = "nodecollision"
    NODES = "nodes"
    NODES2 = "nodes2"
    PARTICLES = "particles"
    PISTONPROPS = "pistonprops"
    PROP_CAMERA_MODE = "prop_camera_mode"
    PROPS = "props"
    RAILGROUPS = "railgroups"
    RESCUER = "rescuer"
    RIGIDIFIERS = "rigidifiers"
    ROLLON = "rollon"
    ROPABLES = "ropables"
    ROPES = "ropes"
    ROTATORS = "rotators"
    ROTATORS2 = "rotators2"
    SCREWPROPS = "screwprops"
    SECTION = "section"
    SECTIONCONFIG = "sectionconfig"
    SET_BEAM_DEFAULTS = "set_beam_defaults"
    SET_BEAM_DEFAULTS_SCALE = "set_beam_defaults_scale"
    SET_COLLISION_RANGE = "set_collision_range"
    SET_DEFAULT_MINIMASS = "set_default_minimass"
    SET_INERTIA_DEFAULTS = "set_inertia_defaults"
    SET_MANAGEDMATERIALS_OPTIONS = "set_managedmaterials_options"
    SET_NODE_DEFAULTS = "set_node_defaults"
    SET_SKELETON_SETTINGS = "set_skeleton_settings"
    SHOCKS = "shocks"
    SHOCKS2 = "shocks2"
    SHOCKS3 = "shocks3"
    SLIDENODE_CONNECT_INSTANTLY = "slidenode_connect_instantly"
    SLIDENODES = "slidenodes"
    SOUNDSOURCES = "soundsources"
    SOUNDSOURCES2 = "soundsources2"
    SPEEDLIMITER = "speedlimiter"
    SUBMESH = "submesh"
    SUBMESH_GROUNDMODEL = "submesh_groundmodel"
    TEXCOORDS = "texcoords"
    TIES = "ties"
    TORQUECURVE = "torquecurve"
    TRACTIONCONTROL = "TractionControl"
    TRANSFERCASE = "transfercase"
    TRIGGERS = "triggers"
    TURBOJETS = "turbojets"
    TURBOPROPS = "turboprops"
    TURBOPROPS2 = "turboprops2"
    VIDEOCAMERA = "videocamera"
    WHEELDETACHERS = "wheeldetachers"
    WHEELS = "wheels"
    WHEELS2 = "wheels2"
    WINGS = "wings"


_FLAGS = {
    Keyword.DISABLEDEFAULTSOUNDS, Keyword.ENABLE_ADVANCED_DEFORMATION, Keyword.FORWARDCOMMANDS,
    Keyword.HIDEINCHOOSER, Keyword.IMPORTCOMMANDS, Keyword.LOCKGROUP_DEFAULT_NOLOCK,
    Keyword.RESCUER, Keyword.ROLLON, Keyword.SLIDENODE_CONNECT_INSTANTLY,
}

_DIRECTIVES = {
    Keyword.ADD_ANIMATION, Keyword.ANTILOCKBRAKES, Keyword.AUTHOR, Keyword.BACKMESH,
    Keyword.CRUISECONTROL, Keyword.DETACHER_GROUP, Keyword.EXTCAMERA, Keyword.FILEFORMATVERSION,
    Keyword.FILEINFO, Keyword.FLEXBODY_CAMERA_MODE, Keyword.FORSET, Keyword.GUID,
    Keyword.PROP_CAMERA_MODE, Keyword.SET_BEAM_DEFAULTS, Keyword.SET_BEAM_DEFAULTS_SCALE,
    Keyword.SET_COLLISION_RANGE, Keyword.SET_DEFAULT_MINIMASS, Keyword.SET_INERTIA_DEFAULTS,
    Keyword.SET_MANAGEDMATERIALS_OPTIONS, Keyword.SET_NODE_DEFAULTS, Keyword.SET_SKELETON_SETTINGS,
    Keyword.SPEEDLIMITER, Keyword.SUBMESH, Keyword.SUBMESH_GROUNDMODEL, Keyword.TRACTIONCONTROL,
}

_ENDS = {Keyword.END, Keyword.END_COMMENT, Keyword.END_DESCRIPTION}

_MODULE_SWITCHES = {Keyword.SECTION, Keyword.END_SECTION}

_IGNORED = {
    Keyword.ENVMAP, Keyword.HOOKGROUP, Keyword.NODECOLLISION, Keyword.RIGIDIFIERS,
    Keyword.SECTIONCONFIG,
}


def keyword_kind(keyword: Keyword) -> KeywordKind:
    if keyword in _FLAGS:
        return KeywordKind.FLAG
    if keyword in _DIRECTIVES:
        return KeywordKind.DIRECTIVE
    if keyword in _ENDS:
        return KeywordKind.END
    if keyword in _MODULE_SWITCHES:
        return KeywordKind.MODULE
    if keyword in _IGNORED:
        return KeywordKind.IGNORED
    return KeywordKind.SECTION


def _stands_alone(keyword: Keyword) -> bool:
    """Section and end keywords must be alone on their line."""
    return keyword_kind(keyword) in (KeywordKind.SECTION, KeywordKind.END) \
        or keyword in (Keyword.END_SECTION, Keyword.SUBMESH, Keyword.BACKMESH)


_KEYWORDS_EXACT: dict[str, Keyword] = {kw.value: kw for kw in Keyword}
_KEYWORDS_NOCASE: dict[str, Keyword] = {kw.value.lower(): kw for kw in Keyword}


# --------------------------
# Line sanitizer
# --------------------------

def _replace_invalid_utf8(exc: UnicodeError) -> tuple[str, int]:
    if isinstance(exc, UnicodeDecodeError):
        return "?", exc.end
    raise exc


codecs.register_error("rigdef_placeholder", _replace_invalid_utf8)


def decode_line(raw: str | bytes) -> str:
    """Decode a raw line, replacing invalid UTF-8 sequences with '?'."""
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", errors="rigdef_placeholder")
    return raw


def trim_trailing_comment(line: str) -> str:
    """
    Cut a trailing comment off a line.

    A ';' starts a comment anywhere. Otherwise the last '/' is taken and the
    cut point moves backwards over preceding '/', space and tab characters.

    Example:
        >>> trim_trailing_comment('1, 2 ;; comment')
        '1, 2 '
        >>> trim_trailing_comment('1, 2 // comment')
        '1, 2'
        >>> trim_trailing_comment('a/b')
        'a'
    """
    semicolon = line.find(";")
    if semicolon != -1:
        return line[:semicolon]
    comment_start = line.rfind("/")
    if comment_start == -1:
        return line
    while comment_start > 0 and line[comment_start - 1] in "/ \t":
        comment_start -= 1
    return line[:comment_start]


def sanitize_line(raw: str | bytes, max_length: int = LINE_BUFFER_LENGTH) -> str | None:
    """
    Prepare a raw input line for processing.

    Args:
        raw: One line of input, with or without line terminator
        max_length: Length limit; longer lines are truncated

    Returns:
        Trimmed line without comment, or None if the line is blank or a comment line
    """
    line = decode_line(raw[:max_length]).rstrip("\r\n")
    line = line.lstrip(" \t")
    if not line or line[0] in ";/":
        return None
    line = trim_trailing_comment(line).strip()
    return line or None


# --------------------------
# Tokenizer
# --------------------------

SEPARATORS = " \t:|,"

_ARG_RE = re.compile(r"[^ \t:|,]+")


def tokenize_line(line: str, max_args: int = LINE_MAX_ARGS) -> list[tuple[int, int]]:
    """
    Split a line into argument spans.

    Returns:
        List of (start, length) pairs indexing into `line`

    Example:
        >>> tokenize_line('1, 0.0:2')
        [(0, 1), (3, 3), (7, 1)]
    """
    spans: list[tuple[int, int]] = []
    for m in _ARG_RE.finditer(line):
        if len(spans) >= max_args:
            break
        spans.append((m.start(), m.end() - m.start()))
    return spans


def split_list(text: str, delimiters: str) -> list[str]:
    """
    Split on any of `delimiters`, dropping empty items.

    Example:
        >>> split_list('1,,2, 3', ',')
        ['1', '2', ' 3']
    """
    return [t for t in re.split("[" + re.escape(delimiters) + "]", text) if t]


# --------------------------
# Keyword resolver
# --------------------------

_LEADING_WORD_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


def identify_keyword(line: str) -> Keyword | None:
    """
    Identify the keyword a sanitized line starts with.

    Exact spelling is tried first, then a case-insensitive lookup.

    Returns:
        The Keyword, or None if the line is a data line
    """
    first = line[:1].lower()
    if not ("a" <= first <= "z"):
        return None

    m = _LEADING_WORD_RE.match(line)
    if not m:
        return None
    word = m.group(0)
    rest = line[m.end():]

    keyword = _KEYWORDS_EXACT.get(word)
    if keyword is None:
        keyword = _KEYWORDS_NOCASE.get(word.lower())
    if keyword is None:
        return None

    if _stands_alone(keyword):
        if rest.strip(" \t"):
            return None
    elif rest and rest[0] not in SEPARATORS:
        return None
    return keyword
