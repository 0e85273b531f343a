"""Object store access for the reconciler.

This module defines the four-operation store interface the reconciler
depends on and its implementation on top of the Kubernetes API server.
Cascading deletion of dependents is the API server's job: its garbage
collector removes objects whose controller owner is gone.
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Protocol

from icecream import ic
from kubernetes import client
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import MaxRetryError
from urllib3.exceptions import TimeoutError as Urllib3TimeoutError

from presentation_operator.config import DEFAULT_REQUEST_TIMEOUT
from presentation_operator.convert import (
    from_v1_config_map,
    from_v1_pod,
    presentation_from_dict,
    to_v1_config_map,
    to_v1_pod,
)
from presentation_operator.exceptions import (
    ClusterConnectionError,
    ConflictError,
    ObjectNotFoundError,
    StoreError,
    StoreTimeoutError,
)
from presentation_operator.models import (
    PRESENTATION_GROUP,
    PRESENTATION_PLURAL,
    PRESENTATION_VERSION,
    ConfigArtifact,
    Kind,
    ObjectKey,
    Presentation,
    StoredObject,
    WorkloadUnit,
)


class ObjectStore(Protocol):
    """The store operations the reconciler needs.

    Every method raises a StoreError subclass on failure; ``get`` raises
    ObjectNotFoundError when the object does not exist.
    """

    def get(self, kind: Kind, key: ObjectKey) -> StoredObject: ...

    def create(self, obj: ConfigArtifact | WorkloadUnit) -> ConfigArtifact | WorkloadUnit: ...

    def update(self, obj: ConfigArtifact) -> ConfigArtifact: ...

    def delete(self, kind: Kind, key: ObjectKey) -> None: ...


@contextmanager
def _translate_errors(verb: str, kind: Kind, key: ObjectKey) -> Generator[None, None, None]:
    """Map client and transport errors onto the StoreError hierarchy.

    Args:
        verb: The attempted operation, used in error messages.
        kind: Kind of the object involved.
        key: Identity of the object involved.

    Raises:
        ObjectNotFoundError: On HTTP 404.
        ConflictError: On HTTP 409.
        StoreTimeoutError: When the request deadline is exceeded.
        ClusterConnectionError: When the API server is unreachable.
        StoreError: On any other API error.

    """
    try:
        yield
    except ApiException as e:
        match e.status:
            case 404:
                raise ObjectNotFoundError(f"{kind.value} '{key}' not found") from e
            case 409:
                raise ConflictError(f"Failed to {verb} {kind.value} '{key}': {e.reason}") from e
            case _:
                raise StoreError(f"Failed to {verb} {kind.value} '{key}': {e.status} {e.reason}") from e
    except MaxRetryError as e:
        if isinstance(e.reason, Urllib3TimeoutError):
            raise StoreTimeoutError(f"Timed out trying to {verb} {kind.value} '{key}'") from e
        raise ClusterConnectionError(f"Failed to connect to the Kubernetes cluster: {e.reason}") from e
    except Urllib3TimeoutError as e:
        raise StoreTimeoutError(f"Timed out trying to {verb} {kind.value} '{key}'") from e


class KubernetesStore:
    """ObjectStore backed by the Kubernetes API server.

    ConfigMaps and Pods go through CoreV1Api, Presentations through the
    custom objects API.

    Attributes:
        core: CoreV1Api instance.
        custom: CustomObjectsApi instance.
        request_timeout: Deadline in seconds applied to every request.

    """

    def __init__(
        self,
        api_client: client.ApiClient | None = None,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the store.

        Args:
            api_client: Configured API client; the default client is used when omitted.
            request_timeout: Deadline in seconds applied to every request.

        """
        self.core = client.CoreV1Api(api_client)
        self.custom = client.CustomObjectsApi(api_client)
        self.request_timeout: float = request_timeout

    def get(self, kind: Kind, key: ObjectKey) -> StoredObject:
        """Read one object.

        Args:
            kind: Kind of the object.
            key: Identity of the object.

        Returns:
            The stored object converted to its model class.

        Raises:
            ObjectNotFoundError: If the object does not exist.
            StoreError: If the read fails.

        """
        ic(kind, key)
        with _translate_errors("read", kind, key):
            match kind:
                case Kind.PRESENTATION:
                    body = self.custom.get_namespaced_custom_object(
                        group=PRESENTATION_GROUP,
                        version=PRESENTATION_VERSION,
                        namespace=key.namespace,
                        plural=PRESENTATION_PLURAL,
                        name=key.name,
                        _request_timeout=self.request_timeout,
                    )
                    return self._to_presentation(body, key)
                case Kind.CONFIG_MAP:
                    return from_v1_config_map(
                        self.core.read_namespaced_config_map(
                            key.name, key.namespace, _request_timeout=self.request_timeout
                        )
                    )
                case Kind.POD:
                    return from_v1_pod(
                        self.core.read_namespaced_pod(key.name, key.namespace, _request_timeout=self.request_timeout)
                    )
                case _:
                    raise TypeError(f"Unsupported kind: {kind!r}")

    def create(self, obj: ConfigArtifact | WorkloadUnit) -> ConfigArtifact | WorkloadUnit:
        """Create a dependent object.

        Args:
            obj: The ConfigArtifact or WorkloadUnit to create.

        Returns:
            The object as stored, including server-assigned metadata.

        Raises:
            ConflictError: If an object with the same name already exists.
            StoreError: If the write fails.
            TypeError: If the object kind cannot be created by the operator.

        """
        key = obj.metadata.key
        ic(obj)
        match obj:
            case ConfigArtifact():
                with _translate_errors("create", obj.kind, key):
                    created = self.core.create_namespaced_config_map(
                        key.namespace, to_v1_config_map(obj), _request_timeout=self.request_timeout
                    )
                return from_v1_config_map(created)
            case WorkloadUnit():
                with _translate_errors("create", obj.kind, key):
                    created = self.core.create_namespaced_pod(
                        key.namespace, to_v1_pod(obj), _request_timeout=self.request_timeout
                    )
                return from_v1_pod(created)
            case _:
                raise TypeError(f"Cannot create objects of type {type(obj).__name__}")

    def update(self, obj: ConfigArtifact) -> ConfigArtifact:
        """Replace a ConfigMap in place.

        Pods are never updated: their mounted ConfigMap is resolved at
        creation time, so changes require a replacement.

        Args:
            obj: The ConfigArtifact to write. A non-empty resource_version
                makes the write conditional on the stored version.

        Returns:
            The object as stored.

        Raises:
            ObjectNotFoundError: If the ConfigMap no longer exists.
            ConflictError: If the stored version changed since it was read.
            StoreError: If the write fails.
            TypeError: If the object is not a ConfigArtifact.

        """
        if not isinstance(obj, ConfigArtifact):
            raise TypeError(f"Cannot update objects of type {type(obj).__name__}")

        key = obj.metadata.key
        ic(obj)
        with _translate_errors("update", obj.kind, key):
            replaced = self.core.replace_namespaced_config_map(
                key.name, key.namespace, to_v1_config_map(obj), _request_timeout=self.request_timeout
            )
        return from_v1_config_map(replaced)

    def delete(self, kind: Kind, key: ObjectKey) -> None:
        """Delete a dependent object.

        Args:
            kind: Kind of the object.
            key: Identity of the object.

        Raises:
            ObjectNotFoundError: If the object does not exist.
            StoreError: If the delete fails.
            TypeError: If the kind cannot be deleted by the operator.

        """
        ic(kind, key)
        match kind:
            case Kind.CONFIG_MAP:
                with _translate_errors("delete", kind, key):
                    self.core.delete_namespaced_config_map(
                        key.name, key.namespace, _request_timeout=self.request_timeout
                    )
            case Kind.POD:
                with _translate_errors("delete", kind, key):
                    self.core.delete_namespaced_pod(key.name, key.namespace, _request_timeout=self.request_timeout)
            case _:
                raise TypeError(f"Cannot delete objects of kind {kind.value}")

    def list_presentations(self, namespace: str | None = None) -> list[Presentation]:
        """List Presentations in one namespace, or in all namespaces.

        Args:
            namespace: Namespace to list; None lists cluster-wide.

        Returns:
            The Presentations, sorted by namespace and name.

        Raises:
            StoreError: If the list call fails.

        """
        scope = ObjectKey(name="*", namespace=namespace or "*")
        with _translate_errors("list", Kind.PRESENTATION, scope):
            if namespace is None:
                body = self.custom.list_cluster_custom_object(
                    group=PRESENTATION_GROUP,
                    version=PRESENTATION_VERSION,
                    plural=PRESENTATION_PLURAL,
                    _request_timeout=self.request_timeout,
                )
            else:
                body = self.custom.list_namespaced_custom_object(
                    group=PRESENTATION_GROUP,
                    version=PRESENTATION_VERSION,
                    namespace=namespace,
                    plural=PRESENTATION_PLURAL,
                    _request_timeout=self.request_timeout,
                )

        presentations = [self._to_presentation(item, scope) for item in body.get("items", [])]
        ic(len(presentations))
        return sorted(presentations, key=lambda p: (p.metadata.namespace, p.metadata.name))

    @staticmethod
    def _to_presentation(body: dict[str, Any], key: ObjectKey) -> Presentation:
        try:
            return presentation_from_dict(body, default_namespace=key.namespace)
        except ValueError as e:
            raise StoreError(f"Malformed Presentation '{key}': {e}") from e

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"KubernetesStore(request_timeout={self.request_timeout!r})"
