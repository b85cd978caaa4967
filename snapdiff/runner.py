"""Runner that takes a config file and a folder of snapshot pairs."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from .batch import BatchReport, EndpointResult, compare_all, error_record
from .config import DiffConfig, load_config
from .exceptions import ValidationError

logger = logging.getLogger(__name__)


class SnapDiffRunner:
    """
    Compares every dataset in a folder against a shared configuration.

    Each dataset is a JSON file of the form
    {"name": ..., "baseline": <snapshot>, "current": <snapshot>}.
    The name defaults to the file stem.

    Usage:
        runner = SnapDiffRunner("snapdiff.yaml", "datasets")
        report = runner.run()

    Or as a one-liner:
        report = SnapDiffRunner.run_folder("snapdiff.yaml", "datasets")
    """

    def __init__(self, config_path: Optional[str], dataset_folder: str):
        """
        Initialize the runner.

        Args:
            config_path: Path to YAML/JSON config file, or None for defaults
            dataset_folder: Path to folder containing dataset JSON files
        """
        self.config_path = Path(config_path) if config_path else None
        self.dataset_folder = Path(dataset_folder)
        self._config: Optional[DiffConfig] = None

    @property
    def config(self) -> DiffConfig:
        """Load and cache the configuration."""
        if self._config is None:
            self._config = load_config(self.config_path) if self.config_path else DiffConfig()
        return self._config

    def _read_dataset(self, dataset_file: Path) -> tuple[str, dict, dict]:
        try:
            with open(dataset_file) as f:
                dataset = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(
                f"Invalid JSON in dataset: {e.msg}",
                {"file": dataset_file.name, "line": e.lineno, "column": e.colno}
            )

        if not isinstance(dataset, dict):
            raise ValidationError(
                "Dataset must be a JSON object",
                {"file": dataset_file.name, "type": type(dataset).__name__}
            )

        name = dataset.get("name", dataset_file.stem)
        return name, dataset.get("baseline"), dataset.get("current")

    def load_datasets(self) -> list[Union[tuple[str, dict, dict], EndpointResult]]:
        """
        Load datasets in sorted file order.

        Each entry is a (name, baseline, current) triple, or a failed
        EndpointResult named after the file stem when the file is not a
        JSON object.
        """
        if not self.dataset_folder.exists():
            raise FileNotFoundError(f"Dataset folder not found: {self.dataset_folder}")

        entries = []
        for dataset_file in sorted(self.dataset_folder.glob("*.json")):
            try:
                entries.append(self._read_dataset(dataset_file))
            except ValidationError as e:
                logger.warning("Skipping dataset %s: %s", dataset_file.name, e.message)
                entries.append(EndpointResult(name=dataset_file.stem, error=error_record(e)))

        logger.info("Loaded %d datasets from %s", len(entries), self.dataset_folder)
        return entries

    def run(self, print_report: bool = False) -> BatchReport:
        """
        Compare all datasets in the folder.

        Args:
            print_report: Whether to print the summary report

        Returns:
            BatchReport with one result per dataset file, in file order
        """
        entries = self.load_datasets()
        pairs = [e for e in entries if not isinstance(e, EndpointResult)]
        compared = iter(compare_all(
            pairs,
            rules=self.config.rules,
            config=self.config.engine
        ).results)

        report = BatchReport(results=[
            e if isinstance(e, EndpointResult) else next(compared) for e in entries
        ])

        if print_report:
            report.print_summary()

        return report

    @classmethod
    def run_folder(
        cls,
        config_path: Optional[str],
        dataset_folder: str,
        print_report: bool = False
    ) -> BatchReport:
        """
        Convenience class method to run a folder in one call.

        Example:
            report = SnapDiffRunner.run_folder("snapdiff.yaml", "datasets/")
        """
        runner = cls(config_path, dataset_folder)
        return runner.run(print_report=print_report)
