"""Locally generated files for a deployment run."""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class DeploymentWorkspace:
    """Tracks the files a run writes so cleanup can remove them.

    Trust policy documents live in a private temporary directory and are
    always removed. The option settings document is written to a fixed path
    and kept for debugging unless ``clean_all`` is set.
    """

    def __init__(self, options_path: Path, clean_all: bool = False) -> None:
        self.options_path = options_path
        self.clean_all = clean_all
        self._temp_dir: Path | None = None
        self._transient: list[Path] = []

    @property
    def transient_files(self) -> list[Path]:
        """Files that cleanup always removes."""
        return list(self._transient)

    def write_trust_policy(self, name: str, document: dict[str, Any]) -> str:
        """Write a trust policy document and return its JSON text."""
        if self._temp_dir is None:
            self._temp_dir = Path(tempfile.mkdtemp(prefix="eb-deploy-"))
        text = json.dumps(document, indent=2)
        path = self._temp_dir / f"{name}-trust-policy.json"
        path.write_text(text, encoding="utf-8")
        self._transient.append(path)
        logger.debug("Wrote trust policy %s", path)
        return text

    def write_options(self, settings: list[dict[str, str]]) -> Path:
        """Write the option settings document, replacing any previous one."""
        self.options_path.parent.mkdir(parents=True, exist_ok=True)
        self.options_path.write_text(json.dumps(settings, indent=2) + "\n", encoding="utf-8")
        logger.debug("Wrote option settings to %s", self.options_path)
        return self.options_path

    def cleanup(self) -> list[Path]:
        """Remove generated files and return the paths that were removed."""
        removed: list[Path] = []
        for path in self._transient:
            if path.exists():
                path.unlink()
                removed.append(path)
        self._transient.clear()

        if self._temp_dir is not None:
            shutil.rmtree(self._temp_dir, ignore_errors=True)
            self._temp_dir = None

        if self.clean_all and self.options_path.exists():
            self.options_path.unlink()
            removed.append(self.options_path)

        return removed
