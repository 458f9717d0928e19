"""Adapter factory: build the right adapter from a ``sources`` config entry."""

from __future__ import annotations

import random
from typing import Any, Dict, Optional

from academic_digest.errors import ConfigurationError
from academic_digest.sources.arxiv import ArxivAdapter
from academic_digest.sources.base import Clock, SourceAdapter
from academic_digest.sources.crossref import CrossrefAdapter

ADAPTER_TYPES: dict[str, type[SourceAdapter]] = {
    "arxiv": ArxivAdapter,
    "crossref": CrossrefAdapter,
}


def build_adapter(
    config: Dict[str, Any],
    rng: Optional[random.Random] = None,
    clock: Optional[Clock] = None,
) -> SourceAdapter:
    """Return an adapter for the given source config.

    config must have 'type' (arxiv | crossref), or an 'id' naming one of them.
    Optional keys: mock (default true), url, timeout_seconds.
    """
    source_type = str(config.get("type") or config.get("id") or "").lower().strip()
    adapter_cls = ADAPTER_TYPES.get(source_type)
    if adapter_cls is None:
        valid = ", ".join(sorted(ADAPTER_TYPES))
        raise ConfigurationError(f"Unknown source type {source_type!r} (valid types: {valid})")
    return adapter_cls(config, rng=rng, clock=clock)
