"""
pod.py

Read-only views over Pod objects used when looking for orphan pods.
"""
from typing import NamedTuple, Optional
import pykube

PENDING = 'Pending'


class PodIdentity(NamedTuple):
    """Unique creation identifier and version token of a Pod."""
    uid: str
    resource_version: str


def identity_of(pod: pykube.Pod) -> PodIdentity:
    """Capture the identity pair of a Pod as observed right now."""
    metadata = pod.obj.get('metadata', {})
    return PodIdentity(uid=metadata.get('uid', ''),
                       resource_version=metadata.get('resourceVersion', ''))


def phase_of(pod: pykube.Pod) -> str:
    return pod.obj.get('status', {}).get('phase', '')


def is_pending(pod: pykube.Pod) -> bool:
    return phase_of(pod) == PENDING


# TODO: currently only supports a single claim (returns the first volume
# backed by a PersistentVolumeClaim). Members with several claims would
# need every claim checked before the pod could be called an orphan.
def claim_name_of(pod: pykube.Pod) -> Optional[str]:
    """Name of the first PersistentVolumeClaim the Pod mounts, if any."""
    for volume in pod.obj.get('spec', {}).get('volumes') or []:
        claim = volume.get('persistentVolumeClaim')
        if claim is not None:
            return claim.get('claimName') or None
    return None
