"""Conversion between operator models and Kubernetes API objects.

ConfigMaps and Pods travel as typed ``kubernetes.client`` models, while
Presentations come back from the custom objects API as plain dictionaries.
"""

from datetime import datetime
from typing import Any

from kubernetes import client

from presentation_operator.models import (
    ConfigArtifact,
    Kind,
    ObjectMeta,
    OwnerReference,
    Presentation,
    WorkloadUnit,
)


def _meta_to_v1(meta: ObjectMeta) -> client.V1ObjectMeta:
    owner_references = [
        client.V1OwnerReference(
            api_version=ref.api_version,
            kind=ref.kind,
            name=ref.name,
            uid=ref.uid,
            controller=ref.controller,
            block_owner_deletion=ref.block_owner_deletion,
        )
        for ref in meta.owner_references
    ]
    return client.V1ObjectMeta(
        name=meta.name,
        namespace=meta.namespace,
        labels=dict(meta.labels) or None,
        owner_references=owner_references or None,
        resource_version=meta.resource_version or None,
    )


def _meta_from_v1(meta: client.V1ObjectMeta) -> ObjectMeta:
    owner_references = [
        OwnerReference(
            api_version=ref.api_version,
            kind=ref.kind,
            name=ref.name,
            uid=ref.uid,
            controller=bool(ref.controller),
            block_owner_deletion=bool(ref.block_owner_deletion),
        )
        for ref in meta.owner_references or []
    ]
    return ObjectMeta(
        name=meta.name,
        namespace=meta.namespace,
        labels=dict(meta.labels or {}),
        owner_references=owner_references,
        uid=meta.uid or "",
        resource_version=meta.resource_version or "",
        creation_timestamp=meta.creation_timestamp,
        deletion_timestamp=meta.deletion_timestamp,
    )


def to_v1_config_map(artifact: ConfigArtifact) -> client.V1ConfigMap:
    """Convert a ConfigArtifact to a V1ConfigMap request body."""
    return client.V1ConfigMap(
        api_version="v1",
        kind=Kind.CONFIG_MAP.value,
        metadata=_meta_to_v1(artifact.metadata),
        data=dict(artifact.data),
    )


def from_v1_config_map(config_map: client.V1ConfigMap) -> ConfigArtifact:
    """Convert a V1ConfigMap read from the API server to a ConfigArtifact."""
    return ConfigArtifact(
        metadata=_meta_from_v1(config_map.metadata),
        data=dict(config_map.data or {}),
    )


def to_v1_pod(unit: WorkloadUnit) -> client.V1Pod:
    """Convert a WorkloadUnit to a V1Pod request body."""
    return client.V1Pod(
        api_version="v1",
        kind=Kind.POD.value,
        metadata=_meta_to_v1(unit.metadata),
        spec=client.V1PodSpec(
            containers=[
                client.V1Container(
                    name=unit.container_name,
                    image=unit.image,
                    volume_mounts=[client.V1VolumeMount(name=unit.volume_name, mount_path=unit.mount_path)],
                )
            ],
            volumes=[
                client.V1Volume(
                    name=unit.volume_name,
                    config_map=client.V1ConfigMapVolumeSource(name=unit.config_map_name),
                )
            ],
        ),
    )


def from_v1_pod(pod: client.V1Pod) -> WorkloadUnit:
    """Convert a V1Pod read from the API server to a WorkloadUnit.

    Pods not shaped like a slides pod (no containers, no ConfigMap volume)
    are still converted; missing fields become empty strings.
    """
    spec = pod.spec
    containers = (spec.containers if spec else None) or []
    container = containers[0] if containers else None
    mounts = (container.volume_mounts if container else None) or []
    config_map_name = ""
    for volume in (spec.volumes if spec else None) or []:
        if volume.config_map is not None:
            config_map_name = volume.config_map.name or ""
            break

    return WorkloadUnit(
        metadata=_meta_from_v1(pod.metadata),
        container_name=container.name if container else "",
        image=(container.image if container else None) or "",
        config_map_name=config_map_name,
        mount_path=mounts[0].mount_path if mounts else "",
    )


def _parse_timestamp(value: Any) -> datetime | None:
    # YAML loaders already turn unquoted timestamps into datetimes
    if not value or isinstance(value, datetime):
        return value or None
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def presentation_from_dict(body: dict[str, Any], default_namespace: str = "default") -> Presentation:
    """Convert a Presentation custom object dictionary to a Presentation.

    Args:
        body: The custom object as returned by the API or read from YAML.
        default_namespace: Namespace used when the object does not set one.

    Returns:
        The Presentation.

    Raises:
        ValueError: If the object is not a Presentation, has no name, or its
            markdown is not a string.

    """
    kind = body.get("kind", Kind.PRESENTATION.value)
    if kind != Kind.PRESENTATION.value:
        raise ValueError(f"Expected kind '{Kind.PRESENTATION.value}', got '{kind}'")

    metadata: dict[str, Any] = body.get("metadata") or {}
    name = metadata.get("name")
    if not name:
        raise ValueError("Presentation has no metadata.name")

    spec: dict[str, Any] = body.get("spec") or {}
    markdown = spec.get("markdown")
    if markdown is not None and not isinstance(markdown, str):
        raise ValueError(f"Presentation spec.markdown must be a string, got {type(markdown).__name__}")

    return Presentation(
        metadata=ObjectMeta(
            name=name,
            namespace=metadata.get("namespace") or default_namespace,
            labels=dict(metadata.get("labels") or {}),
            uid=metadata.get("uid", ""),
            resource_version=metadata.get("resourceVersion", ""),
            creation_timestamp=_parse_timestamp(metadata.get("creationTimestamp")),
        ),
        markdown=markdown or "",
    )


def to_manifest(obj: ConfigArtifact | WorkloadUnit) -> dict[str, Any]:
    """Render a dependent object as a plain manifest dictionary."""
    body = to_v1_config_map(obj) if isinstance(obj, ConfigArtifact) else to_v1_pod(obj)
    return client.ApiClient().sanitize_for_serialization(body)
