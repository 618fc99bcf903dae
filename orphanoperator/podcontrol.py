"""
podcontrol.py

Deletion of member Pods on behalf of a StatefulCluster.
"""
import json
import logging
from typing import Optional
import kopf
import pykube

from orphanoperator.common import KubeStatefulCluster
from orphanoperator.pod import identity_of


class PodControl:
    """
    PodControl

    Deletes Pods with background propagation. The delete carries the
    Pod's uid and resourceVersion as preconditions, so the API server
    rejects it (409) if the object has been replaced or updated since it
    was read.
    """
    def __init__(self, api: pykube.HTTPClient,
                 logger: Optional[logging.Logger] = None) -> None:
        self.api = api
        self.logger = logger or logging.getLogger(__name__)

    def delete_options(self, pod: pykube.Pod) -> dict:
        identity = identity_of(pod)
        preconditions = {}
        if identity.uid:
            preconditions['uid'] = identity.uid
        if identity.resource_version:
            preconditions['resourceVersion'] = identity.resource_version
        options: dict = {'propagationPolicy': 'Background'}
        if preconditions:
            options['preconditions'] = preconditions
        return options

    def delete_pod(self, cluster: KubeStatefulCluster,
                   pod: pykube.Pod) -> None:
        """Delete pod, posting an event on cluster with the outcome."""
        options = self.delete_options(pod)
        try:
            response = self.api.delete(
                **pod.api_kwargs(data=json.dumps(options)))
            if response.status_code == 404:
                self.logger.debug(
                    f'pod {pod.namespace}/{pod.name} already deleted')
            else:
                self.api.raise_for_status(response)
        except pykube.exceptions.KubernetesError as exc:
            message = (f'delete Pod {pod.name} in StatefulCluster '
                       f'{cluster.name} failed error: {exc}')
            self.logger.error(message)
            kopf.warn(cluster.obj, reason='FailedDelete', message=message)
            raise
        message = (f'delete Pod {pod.name} in StatefulCluster '
                   f'{cluster.name} successful')
        self.logger.info(message)
        kopf.info(cluster.obj, reason='SuccessfulDelete', message=message)
