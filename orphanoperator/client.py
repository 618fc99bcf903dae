"""
client.py

Direct reads against the API server, bypassing the watch cache.
"""
import pykube


class KubeClient:
    """
    KubeClient

    Authoritative Pod and PersistentVolumeClaim lookups. A missing object
    raises pykube.exceptions.ObjectDoesNotExist; any other failure is
    raised unchanged.
    """
    def __init__(self, api: pykube.HTTPClient) -> None:
        self.api = api

    def get_pod(self, namespace: str, name: str) -> pykube.Pod:
        # (pykube needs Optional[str] for namespace)
        return (pykube.Pod
                .objects(self.api, namespace=namespace)  # type: ignore
                .get_by_name(name))

    def get_claim(self, namespace: str,
                  name: str) -> pykube.PersistentVolumeClaim:
        return (pykube.PersistentVolumeClaim
                .objects(self.api, namespace=namespace)  # type: ignore
                .get_by_name(name))
