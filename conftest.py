from unittest.mock import Mock, patch
import pytest
import pykube


@pytest.fixture(autouse=True)
def mock_pykube_global():
    """Mock pykube kubeconfig loading so unit tests never need a cluster.

    Without this, anything that builds pykube.HTTPClient(
    pykube.KubeConfig.from_env()) fails in environments with no
    ~/.kube/config or KUBECONFIG.
    """
    http_client_class = pykube.HTTPClient
    with patch('pykube.KubeConfig.from_env') as mock_from_env, \
         patch('pykube.KubeConfig.from_file') as mock_from_file, \
         patch('pykube.KubeConfig.from_service_account') as mock_from_sa, \
         patch('pykube.HTTPClient') as mock_http_client:

        mock_config = Mock()
        mock_config.api = {'server': 'https://mock-k8s-server'}
        mock_config.namespace = 'default'

        mock_from_env.return_value = mock_config
        mock_from_file.return_value = mock_config
        mock_from_sa.return_value = mock_config

        mock_client = Mock(spec=http_client_class)
        mock_client.config = mock_config
        mock_client.session = Mock()
        mock_http_client.return_value = mock_client

        yield {
            'config': mock_config,
            'client': mock_client,
            'from_env': mock_from_env,
            'from_file': mock_from_file,
            'from_service_account': mock_from_sa,
            'http_client': mock_http_client
        }
