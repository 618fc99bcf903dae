"""
py_types.py

Types describing the kwargs kopf passes to handlers.
"""
from typing import Any, TypedDict, Optional
import kopf
from kopf._cogs.structs import bodies, references, patches
import logging


# kopf does not expose its callback arguments as a type, so these mirror
# the kwargs documented for resource handlers
class CallbackArgs(TypedDict):
    annotations: bodies.Annotations
    labels: bodies.Labels
    body: bodies.Body
    meta: bodies.Meta
    spec: bodies.Spec
    status: bodies.Status
    resource: references.Resource
    uid: Optional[str]
    name: Optional[str]
    namespace: Optional[str]
    patch: patches.Patch
    logger: logging.Logger
    memo: kopf.Memo
    param: Any


class ClusterTimerArgs(CallbackArgs):
    """Timer kwargs, including the indices declared in handlers.py."""
    pods_by_namespace: kopf.Index
    claims_by_name: kopf.Index

