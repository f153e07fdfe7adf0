"""NamingKernel: orchestrates analyzers and rules on the blackboard."""

from __future__ import annotations

from typing import Callable, Optional

from ..config import DEFAULT_CONFIG, NamingConfig
from ..graph.models import ServiceGraph
from ..logging_config import get_logger
from .analyzers import get_default_analyzers
from .models import Diagnostic, NamingResult
from .protocols import Analyzer, Rule
from .rules import get_default_rules
from .store import ResolutionStore
from .toposort import resolve_pass_order

ProgressCallback = Optional[Callable[[str], None]]

logger = get_logger(__name__)


class NamingKernel:
    """Orchestrate resolution: classify -> name -> place -> check."""

    def __init__(
        self,
        graph: ServiceGraph,
        config: NamingConfig | None = None,
        analyzers: list[Analyzer] | None = None,
        rules: list[Rule] | None = None,
    ):
        self.graph = graph
        self.config = config or DEFAULT_CONFIG
        self._analyzers = analyzers if analyzers is not None else get_default_analyzers()
        self._rules = rules if rules is not None else get_default_rules()
        # Wiring errors surface here, before any graph is touched
        self._ordered = resolve_pass_order(self._analyzers)

    def run(self, on_progress: ProgressCallback = None) -> NamingResult:
        """Execute the full pipeline over a fresh store.

        Parameters
        ----------
        on_progress : callable, optional
            Called with a status message at each phase transition.

        Returns
        -------
        NamingResult
            Resolved names, usage, topologies and the ordered diagnostics.
        """

        def _progress(msg: str) -> None:
            if on_progress is not None:
                on_progress(msg)

        store = ResolutionStore(graph=self.graph, config=self.config)

        # Phase 1: analyzers, topologically sorted by requires/provides
        for analyzer in self._ordered:
            missing = analyzer.requires - store.available
            if missing:
                logger.warning(f"Analyzer {analyzer.name} skipped, missing: {sorted(missing)}")
                store.mark_failed(analyzer.provides, f"missing {sorted(missing)}", analyzer.name)
                continue
            _progress(f"Running {analyzer.name}...")
            try:
                analyzer.analyze(store)
            except Exception as e:
                if analyzer.error_mode == "fail":
                    raise
                logger.warning(f"Analyzer {analyzer.name} failed: {e}")
                store.mark_failed(analyzer.provides, str(e), analyzer.name)
                continue
            logger.debug(f"Analyzer {analyzer.name} completed")

        logger.debug(f"Slot status: {store.slot_status()}")

        # Phase 2: rules, read-only
        _progress("Checking names...")
        diagnostics: list[Diagnostic] = []
        rule_errors: dict[str, str] = {}
        for rule in self._rules:
            if not rule.requires.issubset(store.available):
                logger.debug(f"Rule {rule.name} skipped, requires {sorted(rule.requires)}")
                continue
            try:
                found = rule.check(store)
            except Exception as e:
                if rule.error_mode == "fail":
                    raise
                logger.warning(f"Rule {rule.name} failed: {e}")
                rule_errors[rule.name] = str(e)
                continue
            logger.debug(f"Rule {rule.name}: {len(found)} diagnostic(s)")
            diagnostics.extend(found)

        result = NamingResult(
            names=store.names.get(),
            usage=store.usage.get(),
            topologies=store.topology.get({}),
            diagnostics=diagnostics,
            rule_errors=rule_errors,
            slot_status=store.slot_status(),
        )
        logger.info(result.summary())
        return result
