"""Prompt templates for the AI practice analysis.

Prompts are written in Spanish with Argentine voseo because that is the
language the coaching output must use.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, Sequence

from app.models.schemas import AnalysisType, DataAnalysisResult, ProfileRead, SessionRead
from app.services.pedagogy import (
    format_experience,
    format_level,
    get_pedagogical_context,
    get_tone_guideline,
    load_pedagogy,
)


# One instruction line per requested category, in the order the user asked.
INSIGHT_INSTRUCTIONS: dict[str, str] = {
    AnalysisType.PATTERNS.value: (
        "- PATRONES: Explicá los patrones detectados en los datos y qué significan "
        "para el progreso del guitarrista"
    ),
    AnalysisType.STRENGTHS.value: (
        "- FORTALEZAS: Celebrá las estrategias efectivas que está usando (enfoque Growth Mindset)"
    ),
    AnalysisType.WEAKNESSES.value: (
        "- ÁREAS DE MEJORA: Señalá oportunidades de crecimiento con tono constructivo"
    ),
    AnalysisType.EXPERIMENTS.value: (
        "- MICRO-EXPERIMENTOS: Sugerí 2-3 experimentos Kaizen concretos y específicos "
        "para probar en las próximas sesiones"
    ),
    AnalysisType.PLATEAU.value: (
        "- ANÁLISIS DE ESTANCAMIENTO: Si detectás plateau, explicá por qué ocurre y cómo superarlo"
    ),
    AnalysisType.PROGRESSION.value: (
        "- PROGRESO: Analizá la evolución temporal en BPM, calidad y consistencia"
    ),
}

# Markdown sections for the single-step quick analysis.
QUICK_SECTIONS: dict[str, str] = {
    AnalysisType.PATTERNS.value: (
        "## 🔍 Patrones Detectados\n"
        "Identificá tendencias en horarios, técnicas, correlaciones (ej: BPM vs calidad). Usá datos concretos."
    ),
    AnalysisType.STRENGTHS.value: (
        "## ⭐ Fortalezas Observadas\n"
        "Reconocé estrategias efectivas y hábitos positivos. Celebrá el esfuerzo (Growth Mindset)."
    ),
    AnalysisType.WEAKNESSES.value: (
        "## 🎯 Áreas de Mejora\n"
        "Señalá oportunidades de crecimiento con tacto. Enfocate en aprendizaje, no deficiencias."
    ),
    AnalysisType.PLATEAU.value: (
        "## 📊 Análisis de Progreso\n"
        "Evaluá si hay estancamiento en BPM o calidad. Si lo hay, explicá posibles causas."
    ),
    AnalysisType.EXPERIMENTS.value: (
        "## 🧪 Micro-Experimentos Kaizen\n"
        "Proponé 2-3 estrategias concretas y específicas para próximas sesiones."
    ),
    AnalysisType.PROGRESSION.value: (
        "## 📈 Evaluación de Evolución\n"
        "Analizá progreso en BPM, calidad y adherencia a mindset. Destacá mejoras."
    ),
}


def _tag(value: AnalysisType | str) -> str:
    return getattr(value, "value", value)


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _profile_section(profile: ProfileRead, config: dict[str, Any], *, closing_note: bool = False) -> str:
    lines = [
        "# PERFIL DEL GUITARRISTA",
        f"- Nivel: {format_level(profile.level, config)} "
        f"({format_experience(profile.experience_value, profile.experience_unit, config)} de experiencia)",
        f"- Objetivo principal: {profile.main_goal}",
    ]
    if profile.current_challenge:
        lines.append(f"- Desafío actual: {profile.current_challenge}")
    if profile.ideal_practice_frequency:
        lines.append(f"- Frecuencia ideal: {profile.ideal_practice_frequency} días por semana")
    if profile.priority_techniques:
        lines.append(f"- Técnicas prioritarias: {profile.priority_techniques}")
    if profile.additional_context:
        lines.extend(["", "## Contexto Adicional", _dump(profile.additional_context)])
        if closing_note:
            lines.append("*Considerá este contexto al dar recomendaciones.*")
    return "\n".join(lines)


def build_data_analysis_prompt(
    sessions: Sequence[SessionRead],
    profile: ProfileRead | None = None,
    pedagogy: dict[str, Any] | None = None,
) -> str:
    """Prompt asking for a JSON-only structured analysis of every session."""

    config = pedagogy if pedagogy is not None else load_pedagogy()
    sessions_json = _dump([s.model_dump(mode="json", by_alias=True) for s in sessions])

    if profile is not None:
        context = (
            f"{_profile_section(profile, config)}\n\n"
            f"# CONTEXTO PEDAGÓGICO\n{get_pedagogical_context(profile.level, config)}"
        )
    else:
        context = (
            "# PERFIL DEL GUITARRISTA\n"
            "No hay perfil cargado: asumí nivel principiante al evaluar riesgos y progreso."
        )

    return f"""
Sos un asistente experto en análisis de práctica musical deliberada.

{context}

# TAREA
Analizá estas sesiones de práctica de guitarra y devolvé un análisis estructurado en JSON.

# DATOS DE SESIONES
{sessions_json}

# FORMATO DE RESPUESTA
Devolvé SOLO un objeto JSON válido (sin markdown, sin explicaciones) con esta estructura:

{{
  "metrics": {{
    "totalSessions": number,
    "avgDuration": number,
    "avgBPM": number | null,
    "avgQuality": number | null,
    "totalMinutes": number,
    "sessionsByFocus": {{ "Técnica": number, "Ritmo": number, ... }},
    "mindsetCompletionRate": number (0-1)
  }},
  "patterns": [
    {{
      "type": "consistency" | "quality_trend" | "bpm_evolution" | "focus_distribution",
      "description": "descripción breve",
      "evidence": "datos específicos que lo soportan"
    }}
  ],
  "trends": [
    {{
      "metric": "BPM" | "calidad" | "duración" | "mindset",
      "direction": "up" | "down" | "stable",
      "details": "detalles específicos con números"
    }}
  ],
  "correlations": [
    {{
      "variables": ["variable1", "variable2"],
      "relationship": "descripción de la relación",
      "strength": "weak" | "moderate" | "strong"
    }}
  ],
  "alerts": [
    {{
      "severity": "info" | "warning" | "critical",
      "message": "mensaje específico"
    }}
  ]
}}

# INSTRUCCIONES CLAVE
1. Calculá métricas básicas con precisión matemática
2. Detectá patrones reales en los datos (no inventes)
3. Identificá tendencias temporales (comparando sesiones tempranas vs recientes)
4. Buscá correlaciones entre variables (ej: mindset vs calidad, BPM vs errores)
5. Generá alertas si detectás problemas pedagógicos (tensión, velocidad prematura, falta de descansos)
6. Mindset completion rate = promedio de checkboxes marcados por sesión
7. Si no hay datos suficientes para algún campo, usá null o array vacío

IMPORTANTE: Tu respuesta debe ser SOLO el JSON, sin texto adicional.
""".strip()


def build_insights_prompt(
    data_analysis: DataAnalysisResult,
    analysis_types: Iterable[AnalysisType | str],
    profile: ProfileRead | None = None,
    pedagogy: dict[str, Any] | None = None,
) -> str:
    """Prompt turning the structured analysis into a Markdown coaching report."""

    config = pedagogy if pedagogy is not None else load_pedagogy()
    level = profile.level if profile is not None else None

    # Unknown tags produce no instruction.
    instructions = "\n".join(
        INSIGHT_INSTRUCTIONS[tag] for tag in map(_tag, analysis_types) if tag in INSIGHT_INSTRUCTIONS
    )

    if profile is not None:
        directives = [
            "- Todos tus insights deben estar alineados con el objetivo principal del guitarrista",
            "- Si el análisis de datos muestra algo relevante al desafío actual, mencionalo específicamente",
            "- Ajustá el nivel de complejidad de tus recomendaciones según el nivel de experiencia",
            f"- Usá el tono apropiado: {get_tone_guideline(level, config)}",
        ]
        if profile.additional_context:
            directives.append("- Tené en cuenta el contexto adicional del guitarrista al hacer recomendaciones")
        personalization = (
            f"{_profile_section(profile, config, closing_note=True)}\n\n"
            "**IMPORTANTE**:\n" + "\n".join(directives)
        )
    else:
        personalization = (
            "**IMPORTANTE**:\n"
            "- Como no hay perfil de usuario, brindá un análisis general pero útil\n"
            "- Asumí nivel principiante para el tono y complejidad de recomendaciones"
        )

    return f"""
Sos un coach de guitarra experto en práctica deliberada y Growth Mindset.

# CONTEXTO PEDAGÓGICO
{get_pedagogical_context(level, config)}

{personalization}

# ANÁLISIS DE DATOS (Paso 1)
{_dump(data_analysis.to_payload())}

# TAREA
Generá insights personalizados en base al análisis de datos. El usuario solicitó estos tipos de análisis:
{instructions}

# FORMATO DE RESPUESTA
Devolvé tu respuesta en Markdown con esta estructura:

## 📊 Resumen de Datos
[Breve resumen de las métricas clave: sesiones totales, minutos, promedios]

## [Una sección por cada tipo de análisis solicitado]
[Contenido personalizado para cada tipo de análisis pedido]

## 🎯 Próximos Pasos
[2-3 acciones concretas recomendadas]

# ESTILO DE COMUNICACIÓN
- Usá VOSEO ARGENTINO (vos, tenés, practicás, etc.)
- Lenguaje simple y directo
- Celebrá estrategias efectivas, no solo resultados
- Datos específicos > generalidades
- Tono motivador pero honesto
- Evitá jerga técnica avanzada

# REGLAS IMPORTANTES
1. Basá tus insights 100% en los datos reales del análisis
2. NO inventes datos o patrones que no existan
3. Si hay alertas críticas, mencionálas con claridad
4. Reforzá el mindset checklist cuando esté bien usado
5. Proponé acciones concretas y accionables
6. Usá números específicos de las métricas

Generá el análisis ahora en Markdown:
""".strip()


def build_quick_analysis_prompt(
    analysis_types: Iterable[AnalysisType | str],
    summary: list[dict[str, Any]] | dict[str, Any],
) -> str:
    """Single-step prompt over the summarised history; returns Markdown directly."""

    tags = [_tag(t) for t in analysis_types]
    sections = "\n\n".join(QUICK_SECTIONS[tag] for tag in QUICK_SECTIONS if tag in tags)

    return f"""Sos un coach experto en práctica deliberada de guitarra. Tu filosofía es Growth Mindset + Kaizen.

**TONO**: Voseo argentino (usá "vos", "tenés", "practicás"), motivador pero realista, profesional.

**DATOS DE PRÁCTICA**:
```json
{_dump(summary)}
```

**ANÁLISIS SOLICITADOS**: {", ".join(tags)}

Generá una respuesta en Markdown con las siguientes secciones:

{sections}

**Importante**: Basá cada insight en datos específicos del historial."""
