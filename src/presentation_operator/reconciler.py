"""Presentation reconciler.

This module provides the Reconciler class, which converges the ConfigMap
and Pod of one Presentation toward the Presentation's declared markdown.

Each call to ``reconcile`` is a complete, stateless pass: desired state is
recomputed from the Presentation and compared with whatever the store holds
right now. Overlapping passes for the same Presentation therefore converge
to the same result; the API server rejects duplicate creates.
"""

from collections.abc import Callable

from icecream import ic

from presentation_operator import console
from presentation_operator.config import OperatorSettings
from presentation_operator.exceptions import ConflictError, ObjectNotFoundError
from presentation_operator.models import (
    ConfigArtifact,
    Kind,
    ObjectKey,
    Outcome,
    Presentation,
    ReconcileResult,
    WorkloadUnit,
)
from presentation_operator.ownership import set_controller_reference
from presentation_operator.resources import config_artifact_for, workload_unit_for
from presentation_operator.store import ObjectStore

OwnerLinker = Callable[[Presentation, ConfigArtifact | WorkloadUnit], None]


class Reconciler:
    """Reconciles Presentation objects into a ConfigMap and a slides Pod.

    The reconciler performs no retries. Any store or ownership failure
    aborts the pass and propagates; the caller re-invokes ``reconcile``
    later, which is safe because every pass is idempotent.

    Attributes:
        store: Object store used for all reads and writes.
        settings: Image and mount settings for derived pods.
        link_owner: Function stamping ownership onto dependent objects.

    """

    def __init__(
        self,
        store: ObjectStore,
        *,
        settings: OperatorSettings | None = None,
        link_owner: OwnerLinker = set_controller_reference,
    ) -> None:
        """Initialize the Reconciler.

        Args:
            store: Object store used for all reads and writes.
            settings: Image and mount settings; defaults when omitted.
            link_owner: Ownership linkage function, applied to every
                dependent object before it is written.

        """
        self.store = store
        self.settings: OperatorSettings = settings or OperatorSettings()
        self.link_owner = link_owner

    def reconcile(self, key: ObjectKey) -> ReconcileResult:
        """Run one convergence pass for a Presentation.

        Args:
            key: Identity of the Presentation.

        Returns:
            What the pass did to the ConfigMap and the Pod. Both outcomes
            are SKIPPED when the Presentation no longer exists.

        Raises:
            StoreError: If any store call fails.
            OwnerReferenceError: If a dependent cannot be linked to the Presentation.

        """
        try:
            presentation = self.store.get(Kind.PRESENTATION, key)
        except ObjectNotFoundError:
            # Deleted since the request was queued; owned objects are garbage collected
            ic(key)
            return ReconcileResult(key=key, config=Outcome.SKIPPED, pod=Outcome.SKIPPED)

        config_outcome = self.ensure_latest_config_map(presentation)
        # A freshly created ConfigMap counts as changed too
        config_changed = config_outcome is not Outcome.UNCHANGED
        pod_outcome = self.ensure_latest_pod(presentation, config_changed=config_changed)

        result = ReconcileResult(key=key, config=config_outcome, pod=pod_outcome)
        ic(result)
        return result

    def ensure_latest_config_map(self, presentation: Presentation) -> Outcome:
        """Make the Presentation's ConfigMap hold its current markdown.

        Args:
            presentation: The Presentation as read from the store.

        Returns:
            CREATED or UPDATED when the content changed on this pass,
            UNCHANGED when no write was needed.

        """
        desired = config_artifact_for(presentation)
        self.link_owner(presentation, desired)
        key = desired.metadata.key

        try:
            found = self.store.get(Kind.CONFIG_MAP, key)
        except ObjectNotFoundError:
            self.store.create(desired)
            console.step(f"Created ConfigMap {console.highlight(str(key))}")
            return Outcome.CREATED

        if found.content == desired.content:
            return Outcome.UNCHANGED

        desired.metadata.resource_version = found.metadata.resource_version
        self.store.update(desired)
        console.step(f"Updated ConfigMap {console.highlight(str(key))}")
        return Outcome.UPDATED

    def ensure_latest_pod(self, presentation: Presentation, *, config_changed: bool) -> Outcome:
        """Make sure a slides Pod runs with the current ConfigMap content.

        A running Pod does not pick up new ConfigMap content, so when the
        content changed the Pod is deleted and created again under the same
        name. If the create fails after the delete, the Pod stays absent
        until the next pass creates it. A Pod still terminating from an
        earlier delete is not current; the pass fails with ConflictError so
        the caller retries once the API server has removed it.

        Args:
            presentation: The Presentation as read from the store.
            config_changed: Whether the ConfigMap was created or updated on this pass.
                Must be passed as a keyword argument.

        Returns:
            CREATED, REPLACED or UNCHANGED.

        Raises:
            ConflictError: If the existing Pod is still terminating.

        """
        desired = workload_unit_for(presentation, self.settings)
        self.link_owner(presentation, desired)
        key = desired.metadata.key

        try:
            found = self.store.get(Kind.POD, key)
        except ObjectNotFoundError:
            self.store.create(desired)
            console.step(f"Created Pod {console.highlight(str(key))}")
            return Outcome.CREATED

        if found.metadata.terminating:
            ic(found.metadata.deletion_timestamp)
            raise ConflictError(f"Pod '{key}' is still terminating")

        if not config_changed:
            return Outcome.UNCHANGED

        self.store.delete(Kind.POD, key)
        console.step(f"Deleted stale Pod {console.highlight(str(key))}")
        self.store.create(desired)
        console.step(f"Created Pod {console.highlight(str(key))}")
        return Outcome.REPLACED

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Reconciler(store={self.store!r}, settings={self.settings!r})"
