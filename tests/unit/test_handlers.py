"""Unit tests for the kopf handlers."""
import logging
import unittest
from unittest.mock import Mock, patch
import kopf
import pykube
import pytest

from orphanoperator.config import OperatorConfig
import orphanoperator.handlers
from tests.unit.testdata import TestData, claim_body, cluster_body, pod_body


pytestmark = pytest.mark.unit


def timer_kwargs(pods_index=None, claims_index=None) -> dict:
    kwargs = TestData.setup_kwargs(cluster_body())
    kwargs['pods_by_namespace'] = pods_index or {}
    kwargs['claims_by_name'] = claims_index or {}
    return kwargs


class TestStartup:
    def test_configure(self):
        settings = kopf.OperatorSettings()
        orphanoperator.handlers.configure(settings=settings)  # type: ignore
        assert settings.posting.level == logging.INFO
        assert (settings.persistence.finalizer ==
                'orphanoperator.kawaja.net/kopf-finalizer')

    def test_login(self, mocker):
        login_via_pykube = mocker.patch.object(kopf, 'login_via_pykube')
        kw = {'logger': Mock()}
        result = orphanoperator.handlers.login(**kw)  # type: ignore
        assert result is login_via_pykube.return_value
        login_via_pykube.assert_called_once_with(**kw)


class TestIndexes(unittest.TestCase):
    def test_pods_by_namespace(self):
        body = pod_body()
        self.assertEqual(
            orphanoperator.handlers.pods_by_namespace(
                namespace='ns', name='demo-pd-0', body=body),
            {'ns': body})

    def test_claims_by_name(self):
        body = claim_body('c0')
        self.assertEqual(
            orphanoperator.handlers.claims_by_name(
                namespace='ns', name='c0', body=body),
            {('ns', 'c0'): body})


class TestOrphanPodsTimer(unittest.TestCase):
    @patch('orphanoperator.handlers.new_orphan_pods_cleaner')
    def test_timer_runs_cleaner(self, factory):
        factory.return_value.clean.return_value = {
            'demo-pd-0': 'pod is not pending'}
        kw = timer_kwargs()
        result = orphanoperator.handlers.orphan_pods_timer(**kw)
        self.assertEqual(result, {
            'message': 'orphan pod cleaning complete for demo '
                       '(1 pods skipped)'})
        args, kwargs = factory.call_args
        self.assertEqual(args[0],
                         orphanoperator.handlers.CONFIG.orphan_cleanup_enabled)
        self.assertIs(args[2], kw['pods_by_namespace'])
        self.assertIs(args[3], kw['claims_by_name'])
        self.assertIs(kwargs['logger'], kw['logger'])
        self.assertEqual(
            kw['patch']['status']['orphanPods']['skipped'],
            {'demo-pd-0': 'pod is not pending'})

    @patch('orphanoperator.handlers.CONFIG',
           OperatorConfig(orphan_cleanup_enabled=False))
    def test_timer_disabled(self):
        kw = timer_kwargs(pods_index={'ns': [pod_body()]})
        with patch('pykube.Pod.objects') as objects:
            result = orphanoperator.handlers.orphan_pods_timer(**kw)
        objects.assert_not_called()
        self.assertEqual(result, {
            'message': 'orphan pod cleaning complete for demo '
                       '(0 pods skipped)'})
        self.assertEqual(kw['patch']['status']['orphanPods']['state'],
                         'clean')

    @patch('orphanoperator.handlers.CONFIG', OperatorConfig())
    @patch('orphanoperator.podcontrol.kopf')
    @patch('pykube.PersistentVolumeClaim.objects')
    @patch('pykube.Pod.objects')
    def test_timer_deletes_orphan(self, pod_objects, claim_objects,
                                  kopf_mock):
        cached = pod_body('demo-pd-0', claim='c0')
        pod_objects.return_value.get_by_name.side_effect = (
            lambda name: pykube.Pod(Mock(), pod_body(name, claim='c0')))
        claim_objects.return_value.get_by_name.side_effect = (
            pykube.exceptions.ObjectDoesNotExist('c0 does not exist.'))
        kw = timer_kwargs(pods_index={'ns': [cached]})
        api = pykube.HTTPClient(pykube.KubeConfig.from_env())
        api.delete.return_value = Mock(status_code=200)

        result = orphanoperator.handlers.orphan_pods_timer(**kw)

        self.assertEqual(result, {
            'message': 'orphan pod cleaning complete for demo '
                       '(0 pods skipped)'})
        api.delete.assert_called_once()
        kopf_mock.info.assert_called_once()
        kw['logger'].info.assert_any_call(
            'orphan pods cleaner: clean orphan pod: ns/demo-pd-0 '
            'successfully')

    @patch('orphanoperator.handlers.CONFIG', OperatorConfig())
    @patch('pykube.PersistentVolumeClaim.objects')
    def test_timer_reports_failure(self, claim_objects):
        claim_objects.return_value.get_by_name.side_effect = (
            pykube.exceptions.HTTPError(500, 'apiserver unavailable'))
        kw = timer_kwargs(pods_index={'ns': [
            pod_body('demo-pd-0', phase='Running'),
            pod_body('demo-pd-1', claim='c1'),
        ]})

        result = orphanoperator.handlers.orphan_pods_timer(**kw)

        self.assertEqual(result, {
            'message': 'orphan pod cleaning failed for demo'})
        kw['logger'].error.assert_called_once_with(
            'orphan pods cleaner: ns/demo: apiserver unavailable')
        self.assertEqual(kw['patch']['status']['orphanPods']['state'],
                         'error')
        self.assertEqual(kw['patch']['status']['orphanPods']['skipped'],
                         {'demo-pd-0': 'pod is not pending'})
