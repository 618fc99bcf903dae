"""Common definitions which are specific to the orphan pod operator."""
from typing import Optional
import pykube


class ProcessingComplete(BaseException):
    """Signal from a subfunction to a handler that processing is complete."""
    def __init__(self, **kwargs):
        self.ret = {}
        for arg in kwargs:
            self.ret[arg] = kwargs[arg]

    def __str__(self):
        return self.ret.get('message', '')


class SelectorError(ValueError):
    """A label selector could not be built for a cluster."""


class OrphanCleanError(Exception):
    """
    A cleaning pass was abandoned.

    skip_reasons holds the pod name -> skip reason entries gathered before
    the pass stopped.
    """
    def __init__(self, message: str,
                 skip_reasons: Optional[dict[str, str]] = None) -> None:
        super().__init__(message)
        self.skip_reasons: dict[str, str] = (
            skip_reasons if skip_reasons is not None else {})


class KubeStatefulCluster(pykube.objects.NamespacedAPIObject):
    version = 'orphanoperator.kawaja.net/v1'
    endpoint = 'statefulclusters'
    kind = 'StatefulCluster'
