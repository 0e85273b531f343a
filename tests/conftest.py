"""Shared test fixtures for presentation-operator tests."""

import copy
import itertools
import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from presentation_operator.exceptions import ConflictError, ObjectNotFoundError
from presentation_operator.models import (
    ConfigArtifact,
    Kind,
    ObjectKey,
    ObjectMeta,
    Presentation,
    WorkloadUnit,
)


class FakeStore:
    """In-memory ObjectStore that assigns metadata the way an API server does.

    Every write is recorded in ``writes`` as ``(verb, kind, key)``. Errors can
    be injected per ``(verb, kind)`` through ``fail_next``; each injected
    error is raised once. With ``graceful_delete`` set, a deleted object is
    only marked terminating and stays until ``remove`` is called.
    """

    def __init__(self):
        self.objects = {}
        self.writes = []
        self.fail_next = {}
        self.graceful_delete = False
        self._versions = itertools.count(1)

    def _maybe_fail(self, verb, kind):
        error = self.fail_next.pop((verb, kind), None)
        if error is not None:
            raise error

    def _stamp(self, obj):
        obj.metadata.resource_version = str(next(self._versions))
        return obj

    def put_presentation(self, name, namespace="default", markdown=""):
        presentation = Presentation(
            metadata=ObjectMeta(
                name=name,
                namespace=namespace,
                uid=str(uuid.uuid4()),
                creation_timestamp=datetime.now(timezone.utc),
            ),
            markdown=markdown,
        )
        self._stamp(presentation)
        self.objects[(Kind.PRESENTATION, presentation.metadata.key)] = presentation
        return ObjectKey(name=name, namespace=namespace)

    def set_markdown(self, key, markdown):
        self.objects[(Kind.PRESENTATION, key)].markdown = markdown

    def remove(self, kind, key):
        """Delete without recording a write, like the garbage collector."""
        self.objects.pop((kind, key), None)

    def peek(self, kind, key):
        return self.objects.get((kind, key))

    def get(self, kind, key):
        self._maybe_fail("get", kind)
        try:
            return copy.deepcopy(self.objects[(kind, key)])
        except KeyError:
            raise ObjectNotFoundError(f"{kind.value} '{key}' not found") from None

    def create(self, obj):
        self._maybe_fail("create", obj.kind)
        key = obj.metadata.key
        if (obj.kind, key) in self.objects:
            raise ConflictError(f"{obj.kind.value} '{key}' already exists")
        stored = copy.deepcopy(obj)
        stored.metadata.uid = str(uuid.uuid4())
        stored.metadata.creation_timestamp = datetime.now(timezone.utc)
        self._stamp(stored)
        self.objects[(obj.kind, key)] = stored
        self.writes.append(("create", obj.kind, key))
        return copy.deepcopy(stored)

    def update(self, obj):
        self._maybe_fail("update", obj.kind)
        key = obj.metadata.key
        current = self.objects.get((obj.kind, key))
        if current is None:
            raise ObjectNotFoundError(f"{obj.kind.value} '{key}' not found")
        if obj.metadata.resource_version and obj.metadata.resource_version != current.metadata.resource_version:
            raise ConflictError(f"{obj.kind.value} '{key}' was modified")
        stored = copy.deepcopy(obj)
        stored.metadata.uid = current.metadata.uid
        stored.metadata.creation_timestamp = current.metadata.creation_timestamp
        self._stamp(stored)
        self.objects[(obj.kind, key)] = stored
        self.writes.append(("update", obj.kind, key))
        return copy.deepcopy(stored)

    def delete(self, kind, key):
        self._maybe_fail("delete", kind)
        if (kind, key) not in self.objects:
            raise ObjectNotFoundError(f"{kind.value} '{key}' not found")
        if self.graceful_delete:
            self.objects[(kind, key)].metadata.deletion_timestamp = datetime.now(timezone.utc)
        else:
            del self.objects[(kind, key)]
        self.writes.append(("delete", kind, key))


@pytest.fixture
def store():
    """Empty in-memory object store."""
    return FakeStore()


@pytest.fixture
def sample_presentation():
    """Presentation as read from a cluster."""
    return Presentation(
        metadata=ObjectMeta(name="talk", namespace="slides", uid="1234-abcd"),
        markdown="# Hello",
    )


@pytest.fixture
def sample_config_artifact():
    """ConfigMap derived from the sample presentation."""
    return ConfigArtifact(
        metadata=ObjectMeta(name="talk-config", namespace="slides", labels={"app": "talk"}),
        data={"slides.md": "# Hello"},
    )


@pytest.fixture
def sample_workload_unit():
    """Pod derived from the sample presentation."""
    return WorkloadUnit(
        metadata=ObjectMeta(name="talk-pod", namespace="slides", labels={"app": "talk"}),
        container_name="slides",
        image="manueldewald/presentation",
        config_map_name="talk-config",
        mount_path="/config",
    )


@pytest.fixture
def mock_kube_contexts():
    """Mock kubernetes config contexts."""
    with patch("kubernetes.config.list_kube_config_contexts") as mock:
        mock.return_value = ([{"name": "test-context"}], {"name": "test-context"})
        yield mock


@pytest.fixture
def mock_kube_config():
    """Mock kubernetes config loading."""
    with patch("kubernetes.config.load_kube_config") as mock:
        yield mock


@pytest.fixture
def mock_core_v1_api():
    """Mock CoreV1Api."""
    with patch("kubernetes.client.CoreV1Api") as mock:
        api_instance = MagicMock()
        mock.return_value = api_instance
        yield api_instance


@pytest.fixture
def mock_custom_objects_api():
    """Mock CustomObjectsApi."""
    with patch("kubernetes.client.CustomObjectsApi") as mock:
        api_instance = MagicMock()
        mock.return_value = api_instance
        yield api_instance


@pytest.fixture
def sample_presentation_yaml():
    """Sample Presentation manifest."""
    return """apiVersion: haxx.axxes.com/v1
kind: Presentation
metadata:
  name: talk
  namespace: slides
spec:
  markdown: |
    # Hello
    ---
    ## Second slide
"""
