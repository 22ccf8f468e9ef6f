"""Analysis boundary: collaborator protocols, offline catalog, worker thread.

The playback core never sees a raw collaborator failure. safe_analyze()
and safe_identify() convert any exception into a renderable default, and
AnalysisWorker runs the (possibly slow) call off the GUI thread, handing
the result back through a queued signal.

No identification collaborator ships with the app. When one is passed to
AppWindow, each reactant row offers an image button that fills the row
with identified_name().
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from PyQt6.QtCore import QThread, pyqtSignal

from reaction import (
    ChemicalSpecies, ReactionAnalysis, ReactionCondition,
    analysis_from_dict, clean_reactants, failed_analysis,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_DIR = Path(__file__).resolve().parent / "reactions"

UNKNOWN_SPECIES = ChemicalSpecies(name="Unknown", formula="???")


class AnalysisService(Protocol):
    """Protocol for reaction analysis collaborators."""

    def analyze(
        self, reactants: list[str], conditions: ReactionCondition,
    ) -> ReactionAnalysis:
        ...


class IdentificationService(Protocol):
    """Protocol for molecule identification collaborators."""

    def identify(self, image: bytes) -> ChemicalSpecies:
        ...


def safe_analyze(service, reactants, conditions) -> ReactionAnalysis:
    """Call an analysis service, converting any failure to failed_analysis()."""
    try:
        return service.analyze(list(reactants), conditions)
    except Exception:
        logger.exception("Reaction analysis failed")
        return failed_analysis()


def safe_identify(service, image: bytes) -> ChemicalSpecies:
    """Call an identification service, falling back to UNKNOWN_SPECIES."""
    try:
        species = service.identify(image)
    except Exception:
        logger.exception("Error identifying molecule")
        return UNKNOWN_SPECIES
    if not species.name or not species.formula:
        return UNKNOWN_SPECIES
    return species


def identified_name(service, image: bytes) -> str | None:
    """Reactant text for an image, or None when nothing was recognized."""
    species = safe_identify(service, image)
    if species == UNKNOWN_SPECIES:
        logger.info("Molecule in image not recognized")
        return None
    return species.name


def reactant_key(reactants) -> frozenset[str]:
    """Order- and case-insensitive lookup key for a reactant list."""
    return frozenset(r.casefold() for r in clean_reactants(reactants))


# ---------------------------------------------------------------------------
# CatalogAnalysisService
# ---------------------------------------------------------------------------

class CatalogAnalysisService:
    """Offline analysis collaborator backed by a directory of JSON files.

    Each ``*.json`` file holds ``{"reactants": [...], "analysis": {...}}``
    where ``analysis`` uses the collaborator's camelCase payload shape.
    Files that fail to load are skipped with a warning. Conditions are
    accepted but do not influence the lookup.
    """

    def __init__(self, directory: str | Path = DEFAULT_CATALOG_DIR) -> None:
        self.directory = Path(directory)
        self._entries: dict[frozenset[str], ReactionAnalysis] = {}
        self._load()

    def __len__(self) -> int:
        return len(self._entries)

    def _load(self) -> None:
        if not self.directory.is_dir():
            logger.warning("Reaction catalog not found: %s", self.directory)
            return
        for path in sorted(self.directory.glob("*.json")):
            try:
                with open(path, encoding="utf-8") as f:
                    entry = json.load(f)
                key = reactant_key(entry["reactants"])
                analysis = analysis_from_dict(entry["analysis"])
            except (OSError, ValueError, KeyError, TypeError) as exc:
                logger.warning("Skipping catalog entry %s: %s", path.name, exc)
                continue
            self._entries[key] = analysis
        logger.info(
            "Loaded %d catalog reactions from %s", len(self._entries), self.directory,
        )

    def analyze(self, reactants, conditions):
        analysis = self._entries.get(reactant_key(reactants))
        if analysis is None:
            names = ", ".join(clean_reactants(reactants))
            return failed_analysis(
                explanation=f"No reaction data is available for {names}.",
                reaction_type="Unknown",
            )
        return analysis


# ---------------------------------------------------------------------------
# AnalysisWorker
# ---------------------------------------------------------------------------

class AnalysisWorker(QThread):
    """Runs one analysis request in a background thread.

    There is no cancellation: a newer request supersedes this one simply by
    resolving later, since the controller stores whatever arrives last.
    """

    # ReactionAnalysis
    analysis_ready = pyqtSignal(object)

    def __init__(self, service, reactants, conditions):
        super().__init__()
        self._service = service
        self.reactants = list(reactants)
        self.conditions = conditions

    def run(self) -> None:
        logger.debug("Analyzing %s under %s", self.reactants, self.conditions)
        result = safe_analyze(self._service, self.reactants, self.conditions)
        self.analysis_ready.emit(result)
