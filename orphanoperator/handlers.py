import sys
import logging
from typing_extensions import Unpack
import kopf

import orphanoperator
from orphanoperator.cache import claim_index_entry, pod_index_entry
from orphanoperator.cleaner import new_orphan_pods_cleaner
from orphanoperator.cluster import ClusterOverseer
from orphanoperator.common import ProcessingComplete
from orphanoperator.config import OperatorConfig
from orphanoperator.label import MANAGED_BY_LABEL_KEY, MANAGED_BY_LABEL_VALUE
from orphanoperator.py_types import CallbackArgs, ClusterTimerArgs
from orphanoperator.utility import my_name

CONFIG = OperatorConfig.from_env()


@kopf.on.startup()  # type: ignore
def configure(settings: kopf.OperatorSettings, **_) -> None:
    """Set kopf configuration."""
    settings.posting.level = logging.INFO
    settings.persistence.finalizer = (
        'orphanoperator.kawaja.net/kopf-finalizer')
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage(
        prefix='orphanoperator.kawaja.net',
        key='last-handled-configuration')
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage(
        prefix='orphanoperator.kawaja.net')
    print('Orphan Operator Version: ' +
          getattr(orphanoperator, '__version__', '<not set>'),
          file=sys.stderr)
    print('Orphan Operator Build Date: ' +
          getattr(orphanoperator, '__build_date__', '<not set>'),
          file=sys.stderr)
    print('Orphan Operator Git SHA: ' +
          getattr(orphanoperator, '__gitsha__', '<not set>'),
          file=sys.stderr)
    print(f'Orphan pod cleanup enabled: {CONFIG.orphan_cleanup_enabled}, '
          f'interval: {CONFIG.clean_interval}s',
          file=sys.stderr)


@kopf.index('', 'v1', 'pods',
            labels={MANAGED_BY_LABEL_KEY: MANAGED_BY_LABEL_VALUE}
            )  # type: ignore
def pods_by_namespace(namespace, body, **_):
    """Watch cache of cluster member pods, by namespace."""
    return pod_index_entry(namespace, body)


@kopf.index('', 'v1', 'persistentvolumeclaims',
            labels={MANAGED_BY_LABEL_KEY: MANAGED_BY_LABEL_VALUE}
            )  # type: ignore
def claims_by_name(namespace, name, body, **_):
    """Watch cache of cluster member claims, by (namespace, name)."""
    return claim_index_entry(namespace, name, body)


@kopf.timer('orphanoperator.kawaja.net', 'v1', 'statefulclusters',
            initial_delay=CONFIG.initial_delay,
            interval=CONFIG.clean_interval)  # type: ignore
def orphan_pods_timer(**kwargs: Unpack[ClusterTimerArgs]):
    """
    orphan_pods_timer (statefulcluster)

    Delete member pods stuck in Pending because their claim is gone, so
    the StatefulSet controller recreates them together with a new claim.
    """
    kwargs['logger'].debug(
        f'[{my_name()}] reason: timer ({CONFIG.clean_interval}sec)')
    cluster = ClusterOverseer(**kwargs)

    cleaner = new_orphan_pods_cleaner(
        CONFIG.orphan_cleanup_enabled,
        cluster.api,
        kwargs['pods_by_namespace'],
        kwargs['claims_by_name'],
        logger=cluster.logger)

    try:
        cluster.clean_orphan_pods(cleaner)
    except ProcessingComplete as exc:
        return cluster.handle_processing_complete(exc)

    return {'message': f'[{my_name()}] should never happen'}


@kopf.on.login()  # type: ignore
def login(**kwargs: CallbackArgs):
    """Kopf login."""
    return kopf.login_via_pykube(**kwargs)  # type: ignore
