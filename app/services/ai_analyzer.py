"""Claude-powered practice analysis (data analysis -> coaching insights)."""
from __future__ import annotations

import logging
from typing import Any, Sequence

from pydantic import ValidationError

from app.config import get_settings
from app.models.schemas import (
    AnalysisAlert,
    AnalysisType,
    Correlation,
    DataAnalysisResult,
    DetectedPattern,
    MetricTrend,
    ProfileRead,
    SessionRead,
)
from app.services.completion_client import CompletionClient
from app.services.errors import (
    AnalysisStepError,
    AnalysisValidationError,
    NoDataError,
    PracticeAnalysisError,
)
from app.services.json_extractor import extract_json
from app.services.practice_repository import PracticeRepository
from app.services.prompt_builder import (
    build_data_analysis_prompt,
    build_insights_prompt,
    build_quick_analysis_prompt,
)
from app.services.session_summarizer import compute_session_metrics, summarize_sessions


logger = logging.getLogger(__name__)

_LIST_FIELDS = (
    ("patterns", DetectedPattern),
    ("trends", MetricTrend),
    ("correlations", Correlation),
    ("alerts", AnalysisAlert),
)


def normalize_data_analysis(payload: Any, sessions: Sequence[SessionRead]) -> DataAnalysisResult:
    """
    Coerce a Step 1 JSON payload into a ``DataAnalysisResult``.

    Missing or non-list collections become empty lists and items that do not
    match their schema are dropped. ``metrics`` is always recomputed from the
    sessions so the figures do not depend on model arithmetic.

    Raises:
        ValueError: if the payload is not a JSON object.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")

    collections: dict[str, list[Any]] = {}
    for field, model in _LIST_FIELDS:
        raw_items = payload.get(field)
        if not isinstance(raw_items, list):
            raw_items = []
        items = []
        for raw in raw_items:
            try:
                items.append(model.model_validate(raw))
            except ValidationError:
                logger.warning("Dropping malformed %s entry from data analysis: %r", field, raw)
        collections[field] = items

    return DataAnalysisResult(metrics=compute_session_metrics(sessions), **collections)


class PracticeAnalyzer:
    """Runs the two-step analysis over the stored practice history."""

    def __init__(
        self,
        client: CompletionClient,
        repository: PracticeRepository,
        summary_threshold: int | None = None,
    ) -> None:
        self.client = client
        self.repository = repository
        if summary_threshold is None:
            summary_threshold = get_settings().summary_threshold
        self.summary_threshold = summary_threshold

    def _validate_request(self, analysis_types: Sequence[AnalysisType | str]) -> None:
        if not analysis_types:
            raise AnalysisValidationError("Select at least one analysis type")
        self.client.ensure_configured()

    def _fetch_sessions(self, session_limit: int) -> list[SessionRead]:
        sessions = self.repository.fetch_recent_sessions(session_limit)
        if not sessions:
            raise NoDataError("There are no practice sessions to analyze")
        return sessions

    def _fetch_profile(self) -> ProfileRead | None:
        try:
            return self.repository.fetch_profile()
        except Exception:
            # Profile is optional: degrade to generic beginner framing.
            logger.warning("Profile fetch failed, continuing without personalization", exc_info=True)
            return None

    async def _run_data_analysis(
        self,
        sessions: Sequence[SessionRead],
        profile: ProfileRead | None,
    ) -> DataAnalysisResult:
        prompt = build_data_analysis_prompt(sessions, profile)
        try:
            raw_text = await self.client.complete(prompt, self.client.data_analysis_options, step=1)
            return normalize_data_analysis(extract_json(raw_text), sessions)
        except PracticeAnalysisError as exc:
            logger.exception("Data analysis step failed")
            raise AnalysisStepError(1, exc.message) from exc
        except ValueError as exc:
            logger.exception("Data analysis step returned unusable JSON")
            raise AnalysisStepError(1, str(exc)) from exc

    async def _run_insights(
        self,
        data_analysis: DataAnalysisResult,
        analysis_types: Sequence[AnalysisType | str],
        profile: ProfileRead | None,
    ) -> str:
        prompt = build_insights_prompt(data_analysis, analysis_types, profile)
        try:
            return await self.client.complete(prompt, self.client.insights_options, step=2)
        except PracticeAnalysisError as exc:
            logger.exception("Insight generation step failed")
            raise AnalysisStepError(2, exc.message) from exc

    async def analyze(
        self,
        analysis_types: Sequence[AnalysisType | str],
        session_limit: int | None = None,
    ) -> dict[str, Any]:
        """
        Analyse recent practice sessions and produce coaching insights.

        Steps run strictly in order; any failure aborts the whole analysis.

        Returns:
            dict with ``dataAnalysis`` (Step 1 result), ``insights`` (Step 2
            Markdown) and ``sessionCount``.

        Raises:
            AnalysisValidationError, ConfigurationError, NoDataError,
            AnalysisStepError
        """
        self._validate_request(analysis_types)
        limit = session_limit if session_limit is not None else get_settings().default_session_limit

        sessions = self._fetch_sessions(limit)
        profile = self._fetch_profile()
        logger.info(
            "Starting practice analysis | sessions=%d types=%s profile=%s",
            len(sessions),
            ",".join(getattr(t, "value", t) for t in analysis_types),
            "yes" if profile else "no",
        )

        data_analysis = await self._run_data_analysis(sessions, profile)
        logger.info(
            "Data analysis complete | patterns=%d trends=%d correlations=%d alerts=%d",
            len(data_analysis.patterns),
            len(data_analysis.trends),
            len(data_analysis.correlations),
            len(data_analysis.alerts),
        )

        insights = await self._run_insights(data_analysis, analysis_types, profile)
        logger.info("Insights generated | chars=%d", len(insights))

        return {
            "dataAnalysis": data_analysis.to_payload(),
            "insights": insights,
            "sessionCount": len(sessions),
        }

    async def quick_analyze(
        self,
        analysis_types: Sequence[AnalysisType | str],
        session_limit: int | None = None,
    ) -> dict[str, Any]:
        """Single-call analysis over the summarised history."""

        self._validate_request(analysis_types)
        limit = session_limit if session_limit is not None else get_settings().default_session_limit

        sessions = self._fetch_sessions(limit)
        summary = summarize_sessions(sessions, threshold=self.summary_threshold)
        prompt = build_quick_analysis_prompt(analysis_types, summary)

        logger.info("Starting quick analysis | sessions=%d", len(sessions))
        analysis = await self.client.complete(prompt, self.client.insights_options)

        return {"analysis": analysis, "sessionCount": len(sessions)}
