from models.event import Event
from models.state import AmbientState
from models.bundle import ContextBundle, PhaseAssessment, Selection

__all__ = ["Event", "AmbientState", "ContextBundle", "PhaseAssessment", "Selection"]
