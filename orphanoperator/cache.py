"""
cache.py

Readers over the watch-maintained kopf indices of Pods and
PersistentVolumeClaims. These may lag the API server, but never block
on it.
"""
import copy
from typing import Any, Mapping
import kopf
import pykube

from orphanoperator.label import selector_matches


def pod_index_entry(namespace: str, body: kopf.Body) -> dict:
    """Index entry for a Pod: keyed by namespace."""
    return {namespace: copy.deepcopy(dict(body))}


def claim_index_entry(namespace: str, name: str, body: kopf.Body) -> dict:
    """Index entry for a PersistentVolumeClaim: keyed by (namespace, name)."""
    return {(namespace, name): copy.deepcopy(dict(body))}


class PodLister:
    """List cached Pods in a namespace by label selector."""
    def __init__(self, index: Mapping[Any, Any],
                 api: pykube.HTTPClient) -> None:
        self.index = index
        self.api = api

    def list(self, namespace: str, selector: dict) -> list[pykube.Pod]:
        pods = []
        for body in self.index.get(namespace, []):
            labels = body.get('metadata', {}).get('labels')
            if selector_matches(selector, labels):
                pods.append(pykube.Pod(self.api, copy.deepcopy(body)))
        return pods


class ClaimLister:
    """Look up cached PersistentVolumeClaims by name."""
    def __init__(self, index: Mapping[Any, Any],
                 api: pykube.HTTPClient) -> None:
        self.index = index
        self.api = api

    def get(self, namespace: str,
            name: str) -> pykube.PersistentVolumeClaim:
        for body in self.index.get((namespace, name), []):
            return pykube.PersistentVolumeClaim(self.api,
                                                copy.deepcopy(body))
        raise pykube.exceptions.ObjectDoesNotExist(
            f'{namespace}/{name} does not exist in cache.')
