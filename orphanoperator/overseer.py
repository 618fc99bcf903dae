"""
overseer.py

Overseer base class for Kopf object processing.
"""
from typing_extensions import Unpack
import kopf
import pykube
from typing import Any, Optional
from orphanoperator.common import ProcessingComplete
from orphanoperator.py_types import CallbackArgs
import logging


class Overseer:
    """
    Overseer

    Base class for managing objects under kopf handler.
    """
    def __init__(self, **kwargs: Unpack[CallbackArgs]) -> None:
        self.api = pykube.HTTPClient(pykube.KubeConfig.from_env())
        self.name = str(kwargs.get('name', ''))
        self.patch = kwargs.get('patch')
        self.status = kwargs.get('status')
        logger = kwargs.get('logger')
        self.body = kwargs.get('body')
        self.meta = kwargs.get('meta')
        self.memo = kwargs.get('memo')
        self.spec = kwargs.get('spec', {})
        self.namespace = kwargs.get('namespace')
        # this list should contain all elements of kwargs used in this class,
        # to avoid unpredictable behaviour if a full kwargs list is not passed
        required_kwargs = [
            self.name, self.namespace, self.patch, logger, self.status,
            self.meta, self.body
        ]
        if None in required_kwargs:
            raise kopf.PermanentError('Overseer must be called with full kopf '
                                      f'kwargs ({required_kwargs}')

        self.logger: logging.Logger = logger

    def error(self, *args) -> None:
        """Log an error."""
        self.logger.error(*args)

    def warning(self, *args) -> None:
        """Log a warning."""
        self.logger.warning(*args)

    def info(self, *args) -> None:
        """Log an info message."""
        self.logger.info(*args)

    def debug(self, *args) -> None:
        """Log a debug message."""
        self.logger.debug(*args)

    def get_status(self, state: str, default: Any = None) -> Any:
        """Get a value from the "status" of the overseen object."""
        if self.status is None:
            raise kopf.PermanentError('kopf error: status is None')
        return self.status.get(state, default)

    def set_status(self, state: str, value: Optional[Any] = None) -> None:
        """Set a field in the "status" of the overseen object."""
        # setting value to None will delete the state
        if self.patch is None:
            raise kopf.PermanentError('kopf error: patch is None')
        self.patch.setdefault('status', {})
        self.patch['status'][state] = value

    def get_label(self, label: str, default: Optional[str] = None) -> str:
        """Get a label from the overseen object."""
        if self.meta is None:
            raise kopf.PermanentError('kopf error: meta is None')
        return self.meta.get('labels', {}).get(label, default)

    def handle_processing_complete(self,
                                   exc: ProcessingComplete) -> Optional[dict]:
        if 'info' in exc.ret:
            self.info(exc.ret['info'])
        if 'error' in exc.ret:
            self.error(exc.ret['error'])
        if 'warning' in exc.ret:
            self.warning(exc.ret['warning'])
        if 'message' in exc.ret:
            return {'message': exc.ret['message']}
        return None
