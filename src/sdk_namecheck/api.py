"""Public API for SDK Namecheck.

Users should call analyze() instead of wiring stores and kernels by hand.

Example:
    >>> from sdk_namecheck import analyze, load_graph
    >>>
    >>> graph = load_graph("service.json")
    >>> result = analyze(graph, emitter_name="@azure-tools/typespec-python")
    >>> result.has_errors
    False
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .config import NamingConfig, load_config
from .graph.models import ServiceGraph
from .logging_config import get_logger
from .resolution.kernel import NamingKernel
from .resolution.models import NamingResult

logger = get_logger(__name__)


def analyze(
    graph: ServiceGraph,
    config: Optional[NamingConfig] = None,
    config_file: Optional[Path] = None,
    **overrides: Any,
) -> NamingResult:
    """Resolve names for ``graph`` and collect naming diagnostics.

    Args:
        graph: Finalized service graph
        config: Ready-made configuration. When given, ``config_file`` and
            ``overrides`` are ignored
        config_file: Optional explicit config file path
        **overrides: Configuration overrides (e.g. emitter_name=..., namespace=...)

    Returns:
        NamingResult with names, usage, topologies and diagnostics

    Raises:
        ConfigurationError: If configuration is invalid
        ResolutionError: If the pass wiring is broken
    """
    if config is None:
        config = load_config(config_file=config_file, **overrides)
    logger.debug(
        f"Configuration: scope={config.language_scope}, "
        f"flatten={config.flatten_namespaces}, tolerant={config.tolerates_duplicates}"
    )
    return NamingKernel(graph, config).run()
