from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from gtmpulse.models.config_models import ExperimentConfig
from gtmpulse.models.experiment import VariantAssignment
from gtmpulse.services.splitter import BaseSplitter, LegacyHashSplitter
from gtmpulse.srm_tester import SRMTester
from gtmpulse.utils.log import get_logger

logger = get_logger(__name__)


def assign_variant(experiment: ExperimentConfig, visitor_id: str, splitter: Optional[BaseSplitter] = None) -> str:
    """Variant label for ``visitor_id``; the same pair always gets the same label."""
    splitter = splitter or LegacyHashSplitter(experiment.experiment_id)
    return splitter.assign_variant(visitor_id, experiment.variant_list(), experiment.traffic_split)


def should_run_experiment(experiment: ExperimentConfig, path: str) -> bool:
    """Page targeting: "*" matches anything, otherwise exact or prefix match on the path."""
    return any(page == "*" or path == page or path.startswith(page) for page in experiment.pages)


class AssignmentService:
    """Visitor bucketing for two-arm experiments, with page targeting and distribution preview."""

    @staticmethod
    def assign(
        experiment: ExperimentConfig, visitor_id: str, splitter: Optional[BaseSplitter] = None
    ) -> VariantAssignment:
        variant = assign_variant(experiment, visitor_id, splitter)
        return VariantAssignment(experiment_id=experiment.experiment_id, visitor_id=visitor_id, variant=variant)

    @staticmethod
    def assign_for_page(
        experiments: Iterable[ExperimentConfig], visitor_id: str, path: str
    ) -> List[VariantAssignment]:
        """Assignments for every running experiment that targets ``path``, in configuration order."""
        assignments = []
        for experiment in experiments:
            if not experiment.is_running():
                logger.debug("Skipping %s: status is %s", experiment.experiment_id, experiment.status)
                continue
            if not should_run_experiment(experiment, path):
                continue
            assignments.append(AssignmentService.assign(experiment, visitor_id))
        return assignments

    @staticmethod
    def assign_bulk(
        experiment: ExperimentConfig, visitor_ids: Iterable[str], splitter: Optional[BaseSplitter] = None
    ) -> Dict[str, VariantAssignment]:
        """Bulk-assign many visitors to one experiment."""
        splitter = splitter or LegacyHashSplitter(experiment.experiment_id)
        return {vid: AssignmentService.assign(experiment, vid, splitter) for vid in visitor_ids}

    @staticmethod
    def preview_assignment_distribution(
        experiment: ExperimentConfig,
        sample_visitor_ids: List[str],
        splitter: Optional[BaseSplitter] = None,
        srm_tester: Optional[SRMTester] = None,
    ) -> Dict[str, Any]:
        """Preview the variant split over a sample of visitors, with an SRM check against the configured split."""
        assignments = AssignmentService.assign_bulk(experiment, sample_visitor_ids, splitter)
        distribution = {experiment.variant_a: 0, experiment.variant_b: 0}
        for assignment in assignments.values():
            distribution[assignment.variant] += 1

        total = len(assignments)
        srm = None
        if total:
            srm = (srm_tester or SRMTester()).test_split(
                distribution[experiment.variant_a],
                distribution[experiment.variant_b],
                experiment.traffic_split,
                experiment_id=experiment.experiment_id,
            )
        return {
            "experiment_id": experiment.experiment_id,
            "total_visitors": total,
            "assignment_distribution": distribution,
            "variant_a_share": (distribution[experiment.variant_a] / total) if total else None,
            "expected_variant_a_share": experiment.traffic_split,
            "srm": srm,
        }
