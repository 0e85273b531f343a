"""presentation-operator: reconcile Presentation resources into slide pods.

This package provides a level-triggered reconciler that keeps, for every
``Presentation`` custom resource, a ConfigMap holding its markdown and a
Pod rendering it, replacing the Pod whenever the markdown changes.

Example usage:
    from presentation_operator import Cluster, ObjectKey, Reconciler

    cluster = Cluster(select_context=False)
    reconciler = Reconciler(cluster.store())
    reconciler.reconcile(ObjectKey(name="talk", namespace="default"))
"""

__version__ = "0.1.0"

from presentation_operator.cli import cli
from presentation_operator.cluster import Cluster
from presentation_operator.exceptions import (
    ClusterConnectionError,
    ConflictError,
    ManifestParsingError,
    ObjectNotFoundError,
    OwnerReferenceError,
    PresentationOperatorError,
    StoreError,
    StoreTimeoutError,
)
from presentation_operator.models import ObjectKey, Outcome, ReconcileResult
from presentation_operator.reconciler import Reconciler
from presentation_operator.store import KubernetesStore, ObjectStore

__all__ = [
    # Version
    "__version__",
    # Main CLI
    "cli",
    # Classes
    "Cluster",
    "KubernetesStore",
    "ObjectStore",
    "Reconciler",
    "ObjectKey",
    "Outcome",
    "ReconcileResult",
    # Exceptions
    "PresentationOperatorError",
    "StoreError",
    "ObjectNotFoundError",
    "ConflictError",
    "StoreTimeoutError",
    "ClusterConnectionError",
    "OwnerReferenceError",
    "ManifestParsingError",
]
