"""Rule-based motivational feedback (Growth Mindset + Kaizen).

Messages are Spanish because they are shown to the guitarist as-is.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from app.models.schemas import SessionCreate


@dataclass(frozen=True)
class Insight:
    type: str
    message: str
    kaizen: str | None = None

    def as_text(self) -> str:
        return f"{self.message} {self.kaizen}" if self.kaizen else self.message


@dataclass(frozen=True)
class InsightRule:
    type: str
    predicate: Callable[[SessionCreate], bool]
    message: Callable[[SessionCreate], str]
    kaizen: str


def _checklist_flag(name: str) -> Callable[[SessionCreate], bool]:
    return lambda s: bool(s.mindset_checklist and getattr(s.mindset_checklist, name))


def _bpm_percentage(session: SessionCreate) -> int:
    return round(session.bpm_achieved / session.bpm_target * 100)


def had_bpm_progress(session: SessionCreate) -> bool:
    """True when both BPM values exist and the target was reached."""
    if not session.bpm_target or not session.bpm_achieved:
        return False
    return session.bpm_achieved >= session.bpm_target


# Evaluated in order; first match wins. Strategies are celebrated before results.
INSIGHT_RULES: tuple[InsightRule, ...] = (
    InsightRule(
        type="mindset_complete",
        predicate=lambda s: bool(s.mindset_checklist and s.mindset_checklist.completed_count() == 5),
        message=lambda s: "¡Práctica deliberada perfecta! Usaste todas las estrategias clave.",
        kaizen="Intentá mantener esta consistencia en la próxima sesión.",
    ),
    InsightRule(
        type="slow_practice",
        predicate=_checklist_flag("practiced_slow"),
        message=lambda s: "¡Excelente decisión practicar lento! La velocidad llegará con la precisión.",
        kaizen="En la próxima sesión, intentá grabarte para detectar detalles que no notás en vivo.",
    ),
    InsightRule(
        type="self_recording",
        predicate=_checklist_flag("recorded"),
        message=lambda s: "¡Gran estrategia grabarte! La auto-observación es clave para mejorar.",
        kaizen="Al revisar la grabación, enfocate en UN aspecto específico a mejorar.",
    ),
    InsightRule(
        type="error_review",
        predicate=_checklist_flag("reviewed_mistakes"),
        message=lambda s: "¡Perfecto! Revisar errores es lo que separa la práctica común de la deliberada.",
        kaizen="Identificá el patrón del error más frecuente y creá un micro-ejercicio para corregirlo.",
    ),
    InsightRule(
        type="bpm_progress",
        predicate=had_bpm_progress,
        message=lambda s: (
            f"¡Objetivo alcanzado! ({_bpm_percentage(s)}% del target). "
            "Tu estrategia de práctica está funcionando."
        ),
        kaizen="Antes de subir BPM, consolidá este nivel con 3 tomas perfectas consecutivas.",
    ),
    InsightRule(
        type="high_quality",
        predicate=lambda s: bool(s.quality_rating and s.quality_rating >= 4),
        message=lambda s: f"¡Calidad excelente! ({s.quality_rating}★) Estás desarrollando estándares altos.",
        kaizen="Para la próxima, establecé un objetivo micro aún más específico.",
    ),
    InsightRule(
        type="effort_management",
        predicate=lambda s: bool(s.rpe and 4 <= s.rpe <= 7),
        message=lambda s: "RPE en zona óptima. Estás practicando con esfuerzo desafiante pero sostenible.",
        kaizen="Mantené este nivel de esfuerzo para practicar de forma consistente sin burnout.",
    ),
    InsightRule(
        type="consistency",
        predicate=lambda s: 20 <= s.duration_min <= 45,
        message=lambda s: "Duración ideal para práctica enfocada. La calidad supera a la cantidad.",
        kaizen="En la próxima sesión, dividí el tiempo en bloques de 10 min con micro-pausas.",
    ),
)

FALLBACK_INSIGHT = Insight(
    type="general_encouragement",
    message="¡Sesión registrada! Cada repetición intencional te acerca a tu objetivo.",
    kaizen="Para la próxima: elegí UNA estrategia del checklist de mindset y aplicala.",
)


def generate_insight(session: SessionCreate) -> Insight:
    """Pick the most relevant motivational message for a just-saved session."""

    for rule in INSIGHT_RULES:
        if rule.predicate(session):
            return Insight(type=rule.type, message=rule.message(session), kaizen=rule.kaizen)
    return FALLBACK_INSIGHT


def generate_kaizen_suggestion(recent_sessions: Sequence[SessionCreate]) -> str:
    """Suggest one micro-experiment from patterns in recent sessions."""

    if not recent_sessions:
        return "Empezá con sesiones cortas (20 min) y un objetivo micro específico."

    count = len(recent_sessions)
    checklists = [s.mindset_checklist for s in recent_sessions]

    avg_items = sum(c.completed_count() if c else 0 for c in checklists) / count
    if avg_items < 2:
        return (
            "Micro-experimento: En tu próxima sesión, probá practicar lento "
            "(50% del tempo objetivo) durante 10 minutos."
        )

    if not any(c and c.recorded for c in checklists):
        return (
            "Micro-experimento: Grabá solo 2 minutos de tu próxima práctica "
            "y escuchala con los ojos cerrados."
        )

    reviewed = sum(1 for c in checklists if c and c.reviewed_mistakes)
    if reviewed < count / 2:
        return (
            "Micro-experimento: Identificá tu error #1 más frecuente y creá "
            "un ejercicio de 5 min para corregirlo."
        )

    bpm_sessions = [s for s in recent_sessions if s.bpm_target and s.bpm_achieved]
    if bpm_sessions:
        progress_rate = sum(1 for s in bpm_sessions if had_bpm_progress(s)) / len(bpm_sessions)
        if progress_rate < 0.5:
            return (
                "Micro-experimento: Reducí tu BPM objetivo en 10-20% y enfocate en "
                "3 tomas perfectas antes de subir el tempo."
            )

    return (
        "Micro-experimento: Elegí el aspecto más débil de tu ejecución y dedicale "
        "10 min solo a eso en la próxima sesión."
    )


MILESTONE_MESSAGES: dict[str, str] = {
    "first_session": (
        "¡Primera sesión registrada! El viaje de 10,000 horas comienza con una repetición intencional."
    ),
    "streak_7": "🔥 ¡7 días de práctica consecutiva! Estás construyendo un hábito sólido.",
    "streak_30": "🔥🔥 ¡30 días de racha! La consistencia es la clave del progreso compuesto.",
    "total_hours_10": "⏱️ ¡10 horas de práctica deliberada! Cada minuto cuenta cuando es intencional.",
    "total_hours_50": "⏱️ ¡50 horas de práctica deliberada! Estás en el camino hacia la maestría.",
}


def generate_milestone_message(milestone: str) -> str:
    """Raises KeyError for an unknown milestone."""
    return MILESTONE_MESSAGES[milestone]


def generate_weekly_reflection() -> dict[str, str]:
    return {
        "question1": "¿Qué estrategia de práctica funcionó mejor esta semana?",
        "question2": "¿Qué micro-experimento vas a probar la próxima semana?",
    }


OBJECTIVE_TEMPLATES: tuple[str, ...] = (
    "Cambio limpio de C a G a 60 bpm",
    "Escala pentatónica menor en 3 cuerdas a 80 bpm",
    "Patrón de fingerpicking Travis a 70 bpm sin errores",
    "Acorde de F con cejilla limpio (5 notas sonando)",
    "Hammer-on y pull-off en 1ª y 2ª cuerda a 100 bpm",
    "Ritmo de strumming con palm mute a 120 bpm",
    "Transición G → D → Em → C sin pausas",
    "Solo de [canción] compases 1-4 a 60% tempo",
    "Arpeggio de Am con alternate picking a 90 bpm",
    "Bend de tono completo (2nd fret, 3ª cuerda) afinado",
)


def filter_objective_suggestions(search_term: str = "") -> list[str]:
    """Case-insensitive search over the templates (needs at least 2 chars)."""

    term = search_term.strip().lower()
    if len(term) < 2:
        return list(OBJECTIVE_TEMPLATES)
    return [objective for objective in OBJECTIVE_TEMPLATES if term in objective.lower()]
