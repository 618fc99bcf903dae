"""
label.py

Label conventions for StatefulCluster members and selector helpers.
"""
import enum
import re
from typing import Mapping, Optional

from orphanoperator.common import SelectorError

NAME_LABEL_KEY = 'app.kubernetes.io/name'
MANAGED_BY_LABEL_KEY = 'app.kubernetes.io/managed-by'
INSTANCE_LABEL_KEY = 'app.kubernetes.io/instance'
COMPONENT_LABEL_KEY = 'app.kubernetes.io/component'

NAME_LABEL_VALUE = 'stateful-cluster'
MANAGED_BY_LABEL_VALUE = 'stateful-cluster-operator'

LABEL_VALUE = re.compile(r'^(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?$')
LABEL_VALUE_MAX_LENGTH = 63


class MemberRole(enum.Enum):
    """Role of a cluster member, from its component label."""
    PLACEMENT = 'placement'
    STORAGE = 'storage'
    OTHER = 'other'

    @property
    def bears_storage(self) -> bool:
        return self in (MemberRole.PLACEMENT, MemberRole.STORAGE)


def role_of(labels: Optional[Mapping[str, str]]) -> MemberRole:
    """Map a pod's labels onto its MemberRole."""
    component = (labels or {}).get(COMPONENT_LABEL_KEY)
    if component == MemberRole.PLACEMENT.value:
        return MemberRole.PLACEMENT
    if component == MemberRole.STORAGE.value:
        return MemberRole.STORAGE
    return MemberRole.OTHER


def validate_label_value(value: str) -> None:
    if len(value) > LABEL_VALUE_MAX_LENGTH:
        raise SelectorError(
            f'label value "{value}" is longer than '
            f'{LABEL_VALUE_MAX_LENGTH} characters')
    if not LABEL_VALUE.match(value):
        raise SelectorError(f'invalid label value "{value}"')


def instance_selector(cluster_labels: Optional[Mapping[str, str]]) -> dict:
    """
    instance_selector

    Build the equality selector which scopes pods to one cluster instance,
    using the instance label of the cluster object.
    """
    instance = (cluster_labels or {}).get(INSTANCE_LABEL_KEY)
    if not instance:
        raise SelectorError(
            f'cluster is missing the {INSTANCE_LABEL_KEY} label')
    validate_label_value(instance)
    return {
        NAME_LABEL_KEY: NAME_LABEL_VALUE,
        MANAGED_BY_LABEL_KEY: MANAGED_BY_LABEL_VALUE,
        INSTANCE_LABEL_KEY: instance,
    }


def selector_matches(selector: Mapping[str, str],
                     labels: Optional[Mapping[str, str]]) -> bool:
    """True if every key=value in selector is present in labels."""
    labels = labels or {}
    return all(labels.get(key) == value for key, value in selector.items())
