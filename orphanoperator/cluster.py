"""
cluster.py

Overseer object for managing StatefulCluster objects.
"""
import copy
from typing_extensions import Unpack

from orphanoperator.cleaner import Cleaner
from orphanoperator.common import (KubeStatefulCluster, OrphanCleanError,
                                   ProcessingComplete)
from orphanoperator.overseer import Overseer
from orphanoperator.py_types import CallbackArgs
from orphanoperator.utility import now_iso


class ClusterOverseer(Overseer):
    """
    ClusterOverseer

    Manager for StatefulCluster objects.

    Initialise with the kwargs for a StatefulCluster kopf handler.
    """
    def __init__(self, **kwargs: Unpack[CallbackArgs]) -> None:
        super().__init__(**kwargs)
        self.cluster = KubeStatefulCluster(
            self.api, copy.deepcopy(dict(self.body)))  # type: ignore

    def record_orphan_pods(self, state: str,
                           skip_reasons: dict[str, str]) -> None:
        # status is merge-patched, so pods skipped last time but not this
        # time have to be removed explicitly
        previous = self.get_status('orphanPods') or {}
        skipped: dict = {
            pod_name: None for pod_name in previous.get('skipped') or {}}
        skipped.update(skip_reasons)
        self.set_status('orphanPods', {
            'lastRun': now_iso(),
            'state': state,
            'skipped': skipped,
        })

    def clean_orphan_pods(self, cleaner: Cleaner) -> None:
        """
        clean_orphan_pods

        Run one orphan pod cleaning pass for this cluster and record the
        skip reasons in status.orphanPods. Always raises
        ProcessingComplete.
        """
        try:
            skip_reasons = cleaner.clean(self.cluster)
        except OrphanCleanError as exc:
            self.record_orphan_pods('error', exc.skip_reasons)
            raise ProcessingComplete(
                error=str(exc),
                message=f'orphan pod cleaning failed for {self.name}')
        self.record_orphan_pods('clean', skip_reasons)
        self.debug(f'orphan pods skipped: {skip_reasons}')
        raise ProcessingComplete(
            message=f'orphan pod cleaning complete for {self.name} '
                    f'({len(skip_reasons)} pods skipped)')
