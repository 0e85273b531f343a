"""Ownership linkage between a Presentation and its dependents.

A controller owner reference lets the API server's garbage collector
delete the ConfigMap and Pod once their Presentation is deleted. The
reconciler itself never deletes dependents for that reason.
"""

from presentation_operator.exceptions import OwnerReferenceError
from presentation_operator.models import (
    PRESENTATION_API_VERSION,
    ConfigArtifact,
    OwnerReference,
    Presentation,
    WorkloadUnit,
)


def owner_reference_for(owner: Presentation) -> OwnerReference:
    """Build a controller owner reference pointing at a Presentation.

    Args:
        owner: The Presentation as read from the store.

    Returns:
        The owner reference.

    Raises:
        OwnerReferenceError: If the owner has no uid.

    """
    if not owner.metadata.uid:
        raise OwnerReferenceError(
            f"Presentation '{owner.metadata.key}' has no uid; it must be read from the store before owning objects"
        )
    return OwnerReference(
        api_version=PRESENTATION_API_VERSION,
        kind=owner.kind.value,
        name=owner.metadata.name,
        uid=owner.metadata.uid,
    )


def set_controller_reference(owner: Presentation, dependent: ConfigArtifact | WorkloadUnit) -> None:
    """Stamp ``dependent`` with a controller reference to ``owner``.

    Stamping twice with the same owner is a no-op.

    Args:
        owner: The owning Presentation.
        dependent: The object to link; modified in place.

    Raises:
        OwnerReferenceError: If the owner has no uid, the namespaces differ,
            or the dependent is already controlled by another owner.

    """
    ref = owner_reference_for(owner)

    if dependent.metadata.namespace != owner.metadata.namespace:
        raise OwnerReferenceError(
            f"Cross-namespace owner references are not allowed: "
            f"{dependent.kind.value} '{dependent.metadata.key}' cannot be owned by '{owner.metadata.key}'"
        )

    existing = dependent.metadata.controller_reference()
    if existing is not None and existing.uid != ref.uid:
        raise OwnerReferenceError(
            f"{dependent.kind.value} '{dependent.metadata.key}' is already controlled by "
            f"{existing.kind} '{existing.name}'"
        )

    others = [r for r in dependent.metadata.owner_references if r.uid != ref.uid]
    dependent.metadata.owner_references = [*others, ref]
