"""
cleaner.py

Detect and delete orphan member Pods.

When a cluster scales out or fails over, the operator deletes the old
PersistentVolumeClaim of a member so a new replica does not reuse it. The
claim may linger in the API server because of finalizers (e.g.
kubernetes.io/pvc-protection), and the StatefulSet controller can create
the new Pod before it sees the claim deletion. That Pod then waits in
Pending forever, because nothing recreates its claim. Deleting the Pod
lets the StatefulSet controller create the Pod and its claim again.
"""
import logging
from typing import Optional, Protocol
import pykube

from orphanoperator.cache import ClaimLister, PodLister
from orphanoperator.client import KubeClient
from orphanoperator.common import KubeStatefulCluster, OrphanCleanError
from orphanoperator.label import instance_selector, role_of
from orphanoperator.pod import claim_name_of, identity_of, is_pending
from orphanoperator.podcontrol import PodControl

SKIP_NOT_ELIGIBLE_ROLE = 'not an eligible member role'
SKIP_NOT_PENDING = 'pod is not pending'
SKIP_NO_CLAIM_NAME = 'no claim name found'
SKIP_CLAIM_EXISTS = 'claim exists'
SKIP_POD_NOT_FOUND = 'pod no longer exists'
SKIP_POD_CHANGED = 'pod changed before deletion'


class Cleaner(Protocol):
    def clean(self, cluster: KubeStatefulCluster) -> dict[str, str]:
        ...


def claim_exists(claim_lister: ClaimLister, kube_client: KubeClient,
                 namespace: str, name: str) -> bool:
    """
    claim_exists

    Check the watch cache first. Only when the cache says the claim does
    not exist is the API server asked, as the cache may not yet have seen
    a new claim. Errors other than "does not exist" are raised.
    """
    try:
        claim_lister.get(namespace, name)
        return True
    except pykube.exceptions.ObjectDoesNotExist:
        pass
    try:
        kube_client.get_claim(namespace, name)
        return True
    except pykube.exceptions.ObjectDoesNotExist:
        return False


class OrphanPodsCleaner:
    """
    OrphanPodsCleaner

    Deletes Pending placement/storage Pods of a StatefulCluster whose
    PersistentVolumeClaim no longer exists.

    clean() returns a mapping of pod name to the reason each examined pod
    was left alone. It raises OrphanCleanError, carrying the reasons
    gathered so far, as soon as any lookup or delete fails; remaining pods
    are left for the next pass.
    """
    def __init__(self,
                 pod_lister: PodLister,
                 pod_control: PodControl,
                 claim_lister: ClaimLister,
                 kube_client: KubeClient,
                 logger: Optional[logging.Logger] = None) -> None:
        self.pod_lister = pod_lister
        self.pod_control = pod_control
        self.claim_lister = claim_lister
        self.kube_client = kube_client
        self.logger = logger or logging.getLogger(__name__)

    def clean(self, cluster: KubeStatefulCluster) -> dict[str, str]:
        skip_reasons: dict[str, str] = {}
        try:
            self._clean(cluster, skip_reasons)
        except Exception as exc:
            raise OrphanCleanError(
                f'orphan pods cleaner: {cluster.namespace}/{cluster.name}: '
                f'{exc}',
                skip_reasons=skip_reasons) from exc
        return skip_reasons

    def _skip(self, skip_reasons: dict[str, str], namespace: str,
              pod_name: str, reason: str) -> None:
        self.logger.debug(
            f'orphan pods cleaner: skipping {namespace}/{pod_name}: {reason}')
        skip_reasons[pod_name] = reason

    def _clean(self, cluster: KubeStatefulCluster,
               skip_reasons: dict[str, str]) -> None:
        namespace = cluster.namespace
        selector = instance_selector(cluster.labels)
        pods = self.pod_lister.list(namespace, selector)

        for pod in pods:
            pod_name = pod.name
            if not role_of(pod.labels).bears_storage:
                self._skip(skip_reasons, namespace, pod_name,
                           SKIP_NOT_ELIGIBLE_ROLE)
                continue

            if not is_pending(pod):
                self._skip(skip_reasons, namespace, pod_name,
                           SKIP_NOT_PENDING)
                continue

            claim_name = claim_name_of(pod)
            if not claim_name:
                self._skip(skip_reasons, namespace, pod_name,
                           SKIP_NO_CLAIM_NAME)
                continue

            if claim_exists(self.claim_lister, self.kube_client,
                            namespace, claim_name):
                self._skip(skip_reasons, namespace, pod_name,
                           SKIP_CLAIM_EXISTS)
                continue

            # the claim is gone from both the cache and the API server;
            # make sure the cached pod is still the live one before
            # deleting it
            try:
                api_pod = self.kube_client.get_pod(namespace, pod_name)
            except pykube.exceptions.ObjectDoesNotExist:
                self._skip(skip_reasons, namespace, pod_name,
                           SKIP_POD_NOT_FOUND)
                continue
            if identity_of(api_pod) != identity_of(pod):
                self._skip(skip_reasons, namespace, pod_name,
                           SKIP_POD_CHANGED)
                continue

            try:
                self.pod_control.delete_pod(cluster, pod)
            except Exception as exc:
                self.logger.error(
                    f'orphan pods cleaner: failed to clean orphan pod: '
                    f'{namespace}/{pod_name}, {exc}')
                raise
            self.logger.info(
                f'orphan pods cleaner: clean orphan pod: '
                f'{namespace}/{pod_name} successfully')


class NullOrphanPodsCleaner:
    """Used when orphan cleanup is disabled: reads and deletes nothing."""
    def clean(self, cluster: KubeStatefulCluster) -> dict[str, str]:
        return {}


def new_orphan_pods_cleaner(enabled: bool,
                            api: pykube.HTTPClient,
                            pods_index,
                            claims_index,
                            logger: Optional[logging.Logger] = None
                            ) -> Cleaner:
    """Build the cleaner for the current handler invocation."""
    if not enabled:
        return NullOrphanPodsCleaner()
    return OrphanPodsCleaner(
        pod_lister=PodLister(pods_index, api),
        pod_control=PodControl(api, logger=logger),
        claim_lister=ClaimLister(claims_index, api),
        kube_client=KubeClient(api),
        logger=logger)
