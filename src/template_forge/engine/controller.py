"""
Module: engine.controller

Purpose:
    Orchestrate a generation run.
    Resolve → Count → Enumerate → Compose → (Text fill → Recompose)

Key Classes:
    - TemplateAssembler: Runs generation against a SpecLibrary
    - GenerationRequest: Layout ids, module pool, topic, text-fill flag
    - GenerationResult: Combinations plus count, issue and notice
    - RunToken: Identity of a run, used to discard stale text fills

Dependencies:
    - concurrent.futures: Background text fill
    - engine.enumeration, engine.composition, engine.textfill
    - engine.library: Spec lookup

Used By:
    - cli: ``count`` and ``generate`` commands

Run Identity:
    Every generate() call takes a new token. A text fill finishing after
    a newer run has started is discarded: start_text_fill() resolves to
    None and apply_overrides() returns None. Only the "latest token" is
    shared between threads and it is guarded by a single lock.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Mapping, Optional, Sequence

from template_forge.core.models import Spec, SpecKind

from .composition import CompositionError, OverrideMap, assemble_template_spec
from .config import EngineConfig
from .enumeration import (
    Combination,
    CountResult,
    EnumeratedMapping,
    LayoutContext,
    ValidationIssue,
    count_combinations,
    dedupe_ids,
    enumerate_combinations,
)
from .library import SpecLibrary
from .textfill import (
    SlotTextFiller,
    TextClient,
    TextClientError,
    TextFillError,
    TextFillResult,
    collect_slot_requests,
    create_text_client,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunToken:
    """Identity of one generation run (monotonically increasing)."""
    run_id: int


@dataclass(frozen=True)
class GenerationRequest:
    """
    What to generate.

    Attributes:
        layout_ids: Layouts to fill, in order (deduplicated)
        module_ids: Module pool, in order (deduplicated)
        topic: Optional topic for placeholders and generated text
        text_fill: Request generated text; None uses the config default
    """
    layout_ids: tuple[str, ...]
    module_ids: tuple[str, ...]
    topic: Optional[str] = None
    text_fill: Optional[bool] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "layout_ids", tuple(dedupe_ids(self.layout_ids)))
        object.__setattr__(self, "module_ids", tuple(dedupe_ids(self.module_ids)))

    @property
    def clean_topic(self) -> str:
        return (self.topic or "").strip()


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of a run (immutable).

    Attributes:
        token: Run identity
        request: The request that produced this result
        count: Total combinations available (0 when ``issue`` is set)
        issue: Validation problem, if any
        combinations: Produced templates, at most the generation cap
        notice: Non-fatal message (e.g. text fill fell back to placeholders)
        warnings: Omitted combinations and other per-item problems
        text_fill: Text-fill metadata when generated text was applied
        layouts: Resolved layouts used for the run
        modules: Module id -> spec for the pool

    Example:
        >>> result = assembler.generate(GenerationRequest(("L1",), ("m1", "m2")))
        >>> result.count, len(result.combinations)
        (4, 4)
    """
    token: RunToken
    request: GenerationRequest
    count: int
    issue: Optional[ValidationIssue] = None
    combinations: tuple[Combination, ...] = ()
    notice: Optional[str] = None
    warnings: tuple[str, ...] = ()
    text_fill: Optional[TextFillResult] = None
    layouts: tuple[LayoutContext, ...] = ()
    modules: Mapping[str, Spec] = field(default_factory=dict)
    mappings: tuple[EnumeratedMapping, ...] = ()

    @property
    def ok(self) -> bool:
        return self.issue is None


class TemplateAssembler:
    """
    Runs generation requests against a spec library.

    Usage:
        with TemplateAssembler(library, config=EngineConfig()) as assembler:
            result = assembler.generate(GenerationRequest(("L1",), ("m1",), topic="menu"))
            future = assembler.start_text_fill(result)
            filled = future.result()  # None if a newer run started
    """

    def __init__(
        self,
        library: SpecLibrary,
        *,
        config: Optional[EngineConfig] = None,
        text_client: Optional[TextClient] = None,
    ):
        self._library = library
        self._config = config or EngineConfig()
        self._text_client = text_client
        self._run_ids = itertools.count(1)
        self._lock = threading.Lock()
        self._latest: Optional[RunToken] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def config(self) -> EngineConfig:
        return self._config

    # ─────────────────────────────────────────────────────────────────────────
    # Run identity
    # ─────────────────────────────────────────────────────────────────────────

    def _new_run(self) -> RunToken:
        with self._lock:
            token = RunToken(next(self._run_ids))
            self._latest = token
            return token

    def is_current(self, token: RunToken) -> bool:
        """True while no newer run has started."""
        with self._lock:
            return self._latest == token

    # ─────────────────────────────────────────────────────────────────────────
    # Resolution and counting
    # ─────────────────────────────────────────────────────────────────────────

    def layout_contexts(self, layout_ids: Iterable[str]) -> List[LayoutContext]:
        """
        Resolve layout ids through the library.

        Ids that are missing, or that name a module, resolve to an
        unresolved context so counting reports LAYOUT_NOT_FOUND.
        """
        contexts = []
        for layout_id in dedupe_ids(layout_ids):
            record = self._library.get(layout_id)
            if record is None or record.kind is not SpecKind.LAYOUT:
                contexts.append(LayoutContext.from_spec(layout_id, None))
            else:
                contexts.append(LayoutContext.from_spec(layout_id, record.spec, record.name))
        return contexts

    def validate_and_count(self, layout_ids: Sequence[str], module_ids: Sequence[str]) -> CountResult:
        """Validate a request and return its total combination count."""
        return count_combinations(
            self.layout_contexts(layout_ids),
            dedupe_ids(module_ids),
            ceiling=self._config.count_ceiling,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Generation
    # ─────────────────────────────────────────────────────────────────────────

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Run a generation request.

        Validation problems are returned on the result (count 0, no
        combinations); nothing is raised. When text fill is requested
        and a topic is given, the text is generated synchronously and a
        failure falls back to placeholders with a notice.
        """
        token = self._new_run()
        start = time.perf_counter()

        layouts = self.layout_contexts(request.layout_ids)
        pool = list(request.module_ids)
        counted = count_combinations(layouts, pool, ceiling=self._config.count_ceiling)
        if not counted.ok:
            logger.info(f"Run {token.run_id}: {counted.issue.message}")
            return GenerationResult(token=token, request=request, count=0, issue=counted.issue)

        modules = self._library.modules_by_id(pool)
        mappings = tuple(enumerate_combinations(layouts, pool, cap=self._config.generation_cap))
        combinations, warnings = self._compose(mappings, modules, request.clean_topic, None)

        result = GenerationResult(
            token=token,
            request=request,
            count=counted.count,
            combinations=combinations,
            warnings=warnings,
            layouts=tuple(layouts),
            modules=modules,
            mappings=mappings,
        )
        logger.info(
            f"Run {token.run_id}: {len(combinations)} of {counted.count} combination(s) "
            f"in {time.perf_counter() - start:.2f}s"
        )

        if self._wants_text_fill(request):
            return self._fill_text(result)
        return result

    def _wants_text_fill(self, request: GenerationRequest) -> bool:
        enabled = self._config.text_fill_enabled if request.text_fill is None else request.text_fill
        return bool(enabled and request.clean_topic)

    def _compose(
        self,
        mappings: Sequence[EnumeratedMapping],
        modules: Mapping[str, Spec],
        topic: str,
        overrides: Optional[OverrideMap],
    ) -> tuple[tuple[Combination, ...], tuple[str, ...]]:
        """Assemble every mapping; unresolvable ones are omitted with a warning."""
        combinations: List[Combination] = []
        warnings: List[str] = []
        for item in mappings:
            layout = item.layout
            try:
                spec = assemble_template_spec(
                    layout.spec,
                    layout.slot_rects,
                    item.mapping,
                    modules,
                    topic=topic or None,
                    overrides=overrides,
                )
            except CompositionError as e:
                message = f"Combination {item.idx} ({layout.layout_name}) omitted: {e}"
                logger.warning(message)
                warnings.append(message)
                continue
            combinations.append(Combination(
                idx=len(combinations),
                layout_id=layout.layout_id,
                layout_name=layout.layout_name,
                mapping=dict(item.mapping),
                spec=spec,
            ))
        return tuple(combinations), tuple(warnings)

    # ─────────────────────────────────────────────────────────────────────────
    # Text fill
    # ─────────────────────────────────────────────────────────────────────────

    def _get_text_client(self) -> TextClient:
        if self._text_client is None:
            self._text_client = create_text_client(self._config.text_fill_model)
        return self._text_client

    def _fill_text(self, result: GenerationResult) -> GenerationResult:
        """Request generated text for a result and recompose it."""
        if not result.ok or not result.combinations:
            return result

        request = result.request
        if not request.clean_topic:
            return replace(result, notice="Text fill needs a topic.")

        names = self._library.names()
        requests = collect_slot_requests(result.mappings, result.modules, names)
        layout_names = list(dict.fromkeys(layout.layout_name for layout in result.layouts))

        try:
            filler = SlotTextFiller(self._get_text_client())
            filled = filler.fill(request.clean_topic, requests, layout_names)
        except (TextFillError, TextClientError) as e:
            logger.warning(f"Run {result.token.run_id}: text fill failed, keeping placeholders: {e}")
            return replace(result, notice=str(e))

        combinations, warnings = self._compose(
            result.mappings, result.modules, request.clean_topic, filled.overrides
        )
        return replace(result, combinations=combinations, warnings=warnings, text_fill=filled, notice=None)

    def apply_overrides(self, result: GenerationResult, overrides: OverrideMap) -> Optional[GenerationResult]:
        """
        Recompose a result with externally generated text.

        Returns:
            The recomposed result, or None if a newer run has started
        """
        if not self.is_current(result.token):
            logger.warning(f"Discarding overrides for stale run {result.token.run_id}")
            return None
        combinations, warnings = self._compose(
            result.mappings, result.modules, result.request.clean_topic, overrides
        )
        return replace(result, combinations=combinations, warnings=warnings)

    def start_text_fill(self, result: GenerationResult) -> "Future[Optional[GenerationResult]]":
        """
        Fill text for a placeholder result in the background.

        The future resolves to the filled result (or the placeholder
        result with a notice if filling failed), or to None when a newer
        run started before the text arrived.
        """
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="text-fill")
        return self._executor.submit(self._fill_task, result)

    def _fill_task(self, result: GenerationResult) -> Optional[GenerationResult]:
        filled = self._fill_text(result)
        if not self.is_current(result.token):
            logger.warning(f"Discarding text fill for stale run {result.token.run_id}")
            return None
        return filled

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def shutdown(self) -> None:
        """Shutdown the background text-fill pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "TemplateAssembler":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()
