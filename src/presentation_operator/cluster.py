"""Kubernetes cluster configuration.

This module provides the Cluster class, which loads client configuration
from a kubeconfig context or from the in-cluster service account and
hands out object stores bound to it.
"""

import click
import questionary
from icecream import ic
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from presentation_operator import console
from presentation_operator.config import OperatorSettings
from presentation_operator.exceptions import ClusterConnectionError
from presentation_operator.store import KubernetesStore
from presentation_operator.styles import POINTER, PROMPT_STYLE, QMARK

_IN_CLUSTER_CONTEXT = "in-cluster"


class Cluster:
    """Manages the connection to the cluster the operator works against.

    Attributes:
        context: The active kubeconfig context name, or ``in-cluster``.
        api_client: API client configured for that context.

    """

    def __init__(self, *, select_context: bool = False, in_cluster: bool = False) -> None:
        """Initialize Cluster and load client configuration.

        Args:
            select_context: If True, prompt user to select a kubeconfig context.
                Must be passed as a keyword argument.
            in_cluster: If True, use the pod's service account instead of a kubeconfig.

        Raises:
            ClusterConnectionError: If no usable configuration is found.

        """
        if in_cluster:
            try:
                config.load_incluster_config()
            except ConfigException as e:
                raise ClusterConnectionError(f"Not running inside a cluster: {e}") from e
            self.context: str = _IN_CLUSTER_CONTEXT
            console.action(f"Working with {console.highlight(self.context)} configuration")
        else:
            self.context = self._set_context(select_context=select_context)
            try:
                config.load_kube_config(context=self.context)
            except ConfigException as e:
                raise ClusterConnectionError(f"Invalid or missing kubeconfig: {e}") from e
        self.api_client: client.ApiClient = client.ApiClient()

    @staticmethod
    def _set_context(*, select_context: bool) -> str:
        """Set the Kubernetes context to use.

        Args:
            select_context: If True, prompt user to select a context.
                Must be passed as a keyword argument.

        Returns:
            The selected or current context name.

        Raises:
            ClusterConnectionError: If kubeconfig is invalid or missing.
            click.Abort: If user cancels context selection.

        """
        try:
            contexts, current_context = config.list_kube_config_contexts()
        except ConfigException as e:
            raise ClusterConnectionError(f"Invalid or missing kubeconfig: {e}") from e
        if select_context:
            context_names: list[str] = [context["name"] for context in contexts]
            context: str | None = questionary.select(
                "Select context to reconcile in",
                choices=context_names,
                style=PROMPT_STYLE,
                pointer=POINTER,
                qmark=QMARK,
            ).ask()
            if context is None:
                console.warning("Context selection cancelled.")
                raise click.Abort()
        else:
            context = str(current_context["name"])
        ic(context)
        console.action(f"Working with {console.highlight(context)} cluster")
        return context

    def store(self, settings: OperatorSettings | None = None) -> KubernetesStore:
        """Return an object store bound to this cluster.

        Args:
            settings: Source of the per-request timeout; defaults when omitted.

        Returns:
            A KubernetesStore using this cluster's API client.

        """
        settings = settings or OperatorSettings()
        return KubernetesStore(self.api_client, request_timeout=settings.request_timeout)

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Cluster(context={self.context!r})"
