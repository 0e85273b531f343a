"""Derivation of dependent objects from a Presentation.

Derived names must stay stable: the Pod references the ConfigMap by name,
and existing clusters rely on the ``<name>-config`` / ``<name>-pod`` scheme.
"""

from presentation_operator.config import OperatorSettings
from presentation_operator.models import (
    SLIDES_KEY,
    ConfigArtifact,
    ObjectKey,
    ObjectMeta,
    Presentation,
    WorkloadUnit,
)


def config_map_key(presentation_key: ObjectKey) -> ObjectKey:
    """Return the identity of the ConfigMap owned by a Presentation."""
    return ObjectKey(name=f"{presentation_key.name}-config", namespace=presentation_key.namespace)


def pod_key(presentation_key: ObjectKey) -> ObjectKey:
    """Return the identity of the Pod owned by a Presentation."""
    return ObjectKey(name=f"{presentation_key.name}-pod", namespace=presentation_key.namespace)


def _labels(presentation: Presentation) -> dict[str, str]:
    return {"app": presentation.metadata.name}


def config_artifact_for(presentation: Presentation) -> ConfigArtifact:
    """Build the ConfigMap a Presentation implies.

    Args:
        presentation: The desired state.

    Returns:
        A ConfigArtifact carrying the markdown under ``slides.md``, without
        owner references or store-assigned metadata.

    """
    key = config_map_key(presentation.metadata.key)
    return ConfigArtifact(
        metadata=ObjectMeta(name=key.name, namespace=key.namespace, labels=_labels(presentation)),
        data={SLIDES_KEY: presentation.markdown},
    )


def workload_unit_for(presentation: Presentation, settings: OperatorSettings | None = None) -> WorkloadUnit:
    """Build the slides Pod a Presentation implies.

    The Pod mounts the ConfigMap by name only, so it never holds its own
    copy of the markdown.

    Args:
        presentation: The desired state.
        settings: Image and mount settings; defaults are used when omitted.

    Returns:
        A WorkloadUnit without owner references or store-assigned metadata.

    """
    settings = settings or OperatorSettings()
    key = pod_key(presentation.metadata.key)
    return WorkloadUnit(
        metadata=ObjectMeta(name=key.name, namespace=key.namespace, labels=_labels(presentation)),
        container_name=settings.container_name,
        image=settings.image,
        config_map_name=config_map_key(presentation.metadata.key).name,
        mount_path=settings.mount_path,
    )
