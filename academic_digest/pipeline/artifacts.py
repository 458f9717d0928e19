"""Digest artifacts on disk: <artifacts_dir>/digests/<digest_id>.json"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from academic_digest.models import Article, ComposedDigest

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACTS_DIR = "artifacts"


class ArtifactStore:
    """Write and read composed digests as JSON documents.

    The document is ``digest.to_dict()`` plus the article list under
    ``articles`` and an ``artifacts`` envelope with the digest path and any
    delivery metadata the caller passes in.
    """

    def __init__(self, base_dir: str | Path = DEFAULT_ARTIFACTS_DIR):
        self.base_dir = Path(base_dir)

    def path_for(self, digest_id: str) -> Path:
        return self.base_dir / "digests" / f"{digest_id}.json"

    def exists(self, digest_id: str) -> bool:
        """Check if a digest was already written for this field and week."""
        return self.path_for(digest_id).exists()

    def save(
        self,
        digest: ComposedDigest,
        articles: Optional[List[Article]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Path:
        """Save the digest and return the file path."""
        path = self.path_for(digest.id)
        path.parent.mkdir(parents=True, exist_ok=True)

        document = digest.to_dict()
        document["articles"] = [a.to_dict() for a in (articles if articles is not None else digest.articles)]
        document["artifacts"] = {"digest_path": str(path), **(extra or {})}

        path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Saved digest %s to %s", digest.id, path)
        return path

    def load(self, digest_id: str) -> Dict[str, Any]:
        """Load a saved digest document. Raises FileNotFoundError when absent."""
        return json.loads(self.path_for(digest_id).read_text(encoding="utf-8"))
