"""Reaction data model: species, conditions, steps, scenes and analyses.

Plain frozen dataclasses for everything the playback core consumes, plus
the parser that turns a collaborator's JSON payload (camelCase keys) into
those dataclasses. Coordinates, bonds and energies are supplied data; nothing
here computes them.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


CONCENTRATIONS = ("low", "medium", "high")
VISUAL_STATES = (
    "approach", "collision", "transition", "product_formation", "stabilization",
)

ENERGY_MIN = 0.0
ENERGY_MAX = 100.0
MIN_RADIUS = 1.0


class AnalysisFormatError(ValueError):
    """Raised when a collaborator payload cannot be read as an analysis."""


class SimulationState(enum.Enum):
    """Process-wide playback state, owned by the PlaybackController."""

    IDLE = enum.auto()
    ANALYZING = enum.auto()
    READY = enum.auto()
    PLAYING = enum.auto()
    PAUSED = enum.auto()
    FINISHED = enum.auto()


@dataclass(frozen=True)
class ChemicalSpecies:
    """Identity of a reactant or product."""

    name: str
    formula: str
    description: str | None = None
    color: str | None = None  # hex, e.g. "#ff0000"


@dataclass(frozen=True)
class ReactionCondition:
    """Experimental conditions sent along with an analysis request."""

    temperature: float = 25.0  # Celsius
    concentration: str = "medium"
    solvent: str = "Water (H2O)"
    catalyst: bool = False

    def __post_init__(self):
        if self.concentration not in CONCENTRATIONS:
            raise ValueError(
                f"concentration must be one of {CONCENTRATIONS}, "
                f"got {self.concentration!r}"
            )


@dataclass(frozen=True)
class VisualItem:
    """A positioned, labeled particle in a step's scene.

    Attributes:
        id: Identifier, unique within its step.
        label: Text drawn on the particle ("H", "O", "Cl-", ...).
        x, y: Scene coordinates, conventionally within +/-150.
        color: Fill color as a hex string.
        r: Radius in scene units (> 0).
        bonds: Ids of other items in the same step this one is bonded to.
    """

    id: str
    label: str
    x: float
    y: float
    color: str
    r: float
    bonds: tuple[str, ...] = ()


@dataclass(frozen=True)
class MoleculesState:
    """Per-step intensities, each in [0, 1]."""

    distance: float = 0.0
    vibration: float = 0.0
    glow: float = 0.0


@dataclass(frozen=True)
class ReactionStep:
    """One discrete stage of the reaction."""

    step_number: int
    name: str
    description: str
    energy_level: float
    visual_state: str = "transition"
    visual_scene: tuple[VisualItem, ...] = ()
    molecules_state: MoleculesState = field(default_factory=MoleculesState)


@dataclass(frozen=True)
class ReactionAnalysis:
    """Read-only snapshot produced once per analysis request."""

    can_react: bool
    reaction_type: str
    equation: str
    explanation: str
    exothermic: bool = False
    activation_energy_description: str = ""
    reaction_steps: tuple[ReactionStep, ...] = ()
    products: tuple[ChemicalSpecies, ...] = ()

    @property
    def n_steps(self) -> int:
        return len(self.reaction_steps)

    @property
    def playable(self) -> bool:
        """Whether auto-advance has anything to advance through."""
        return self.can_react and self.n_steps > 0


DEFAULT_CONDITIONS = ReactionCondition()

EXAMPLE_REACTIONS = (
    ("Water Formation", ("Hydrogen (H2)", "Oxygen (O2)"), "Synthesis"),
    ("Neutralization", ("HCl", "NaOH"), "Acid-Base"),
    ("Combustion", ("Methane (CH4)", "Oxygen (O2)"), "Redox"),
    ("Esterification", ("Acetic Acid", "Ethanol"), "Condensation"),
)

SOLVENT_OPTIONS = (
    "Water (H2O)",
    "Ethanol (EtOH)",
    "Acetone",
    "Dichloromethane (DCM)",
    "Hexane",
    "None (Gas Phase)",
)


def clean_reactants(reactants) -> list[str]:
    """Trim reactant names and drop the empty ones, preserving order."""
    return [r.strip() for r in reactants if r and r.strip()]


def failed_analysis(
    explanation="Unable to analyze reaction at this time. "
                "Please check your inputs.",
    reaction_type="Error",
) -> ReactionAnalysis:
    """The renderable value handed to the core when analysis fails."""
    return ReactionAnalysis(
        can_react=False,
        reaction_type=reaction_type,
        equation="",
        explanation=explanation,
    )


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------

def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def _number(raw, key, default=None):
    value = raw.get(key, default)
    if value is None:
        raise AnalysisFormatError(f"missing numeric field {key!r}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AnalysisFormatError(f"field {key!r} is not a number: {value!r}")
    return float(value)


def _mapping(raw, what):
    if not isinstance(raw, dict):
        raise AnalysisFormatError(f"{what} must be an object, got {type(raw).__name__}")
    return raw


def _sequence(raw, what):
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise AnalysisFormatError(f"{what} must be an array, got {type(raw).__name__}")
    return raw


def species_from_dict(raw) -> ChemicalSpecies:
    raw = _mapping(raw, "species")
    return ChemicalSpecies(
        name=str(raw.get("name", "")),
        formula=str(raw.get("formula", "")),
        description=raw.get("description"),
        color=raw.get("color"),
    )


def item_from_dict(raw) -> VisualItem:
    raw = _mapping(raw, "visual item")
    if "id" not in raw:
        raise AnalysisFormatError("visual item without an id")
    bonds = tuple(str(b) for b in _sequence(raw.get("bonds"), "bonds"))
    return VisualItem(
        id=str(raw["id"]),
        label=str(raw.get("label", "")),
        x=_number(raw, "x"),
        y=_number(raw, "y"),
        color=str(raw.get("color", "#94a3b8")),
        r=max(MIN_RADIUS, _number(raw, "r", 10.0)),
        bonds=bonds,
    )


def step_from_dict(raw, position=0) -> ReactionStep:
    """Parse one reaction step.

    Duplicate item ids are kept at their first occurrence; the rest are
    dropped with a warning so the scene stays a well-formed id -> item map.
    """
    raw = _mapping(raw, "reaction step")

    items = []
    seen = set()
    for item_raw in _sequence(raw.get("visualScene"), "visualScene"):
        item = item_from_dict(item_raw)
        if item.id in seen:
            logger.warning(
                "Step %d: duplicate particle id %r dropped", position, item.id,
            )
            continue
        seen.add(item.id)
        items.append(item)

    ms_raw = raw.get("moleculesState") or {}
    ms_raw = _mapping(ms_raw, "moleculesState")
    molecules_state = MoleculesState(
        distance=_clamp(_number(ms_raw, "distance", 0.0), 0.0, 1.0),
        vibration=_clamp(_number(ms_raw, "vibration", 0.0), 0.0, 1.0),
        glow=_clamp(_number(ms_raw, "glow", 0.0), 0.0, 1.0),
    )

    visual_state = raw.get("visualState", "transition")
    if visual_state not in VISUAL_STATES:
        logger.warning(
            "Step %d: unknown visual state %r, using 'transition'",
            position, visual_state,
        )
        visual_state = "transition"

    return ReactionStep(
        step_number=int(raw.get("stepNumber", position + 1)),
        name=str(raw.get("name", f"Step {position + 1}")),
        description=str(raw.get("description", "")),
        energy_level=_clamp(_number(raw, "energyLevel", 0.0), ENERGY_MIN, ENERGY_MAX),
        visual_state=visual_state,
        visual_scene=tuple(items),
        molecules_state=molecules_state,
    )


def analysis_from_dict(raw) -> ReactionAnalysis:
    """Build a ReactionAnalysis from a collaborator JSON payload.

    Raises:
        AnalysisFormatError: If the payload is structurally broken.
    """
    raw = _mapping(raw, "analysis")
    steps = tuple(
        step_from_dict(s, i)
        for i, s in enumerate(_sequence(raw.get("reactionSteps"), "reactionSteps"))
    )
    products = tuple(
        species_from_dict(p)
        for p in _sequence(raw.get("products"), "products")
    )
    return ReactionAnalysis(
        can_react=bool(raw.get("canReact", False)),
        reaction_type=str(raw.get("reactionType", "")),
        equation=str(raw.get("equation", "")),
        explanation=str(raw.get("explanation", "")),
        exothermic=bool(raw.get("exothermic", False)),
        activation_energy_description=str(
            raw.get("activationEnergyDescription", "")
        ),
        reaction_steps=steps,
        products=products,
    )
