#!/usr/bin/env python
"""Command-line interface for presentation-operator.

This module provides the CLI entry point, which runs one reconciliation
pass for a single Presentation or for every Presentation in a namespace,
or previews the objects a manifest implies.
"""

import sys

import click
from icecream import ic
from rich.markup import escape

from presentation_operator import __version__, console
from presentation_operator.cluster import Cluster
from presentation_operator.config import DEFAULT_IMAGE, DEFAULT_REQUEST_TIMEOUT, OperatorSettings
from presentation_operator.exceptions import PresentationOperatorError
from presentation_operator.models import ObjectKey, ReconcileResult
from presentation_operator.parsing import parse_presentation_file, render_dependents
from presentation_operator.reconciler import Reconciler
from presentation_operator.resources import config_map_key, pod_key
from presentation_operator.store import KubernetesStore


def reconcile_presentation(reconciler: Reconciler, key: ObjectKey) -> ReconcileResult:
    """Reconcile one Presentation and print the outcome.

    Args:
        reconciler: Reconciler to run the pass with.
        key: Identity of the Presentation.

    Returns:
        The result of the pass.

    """
    console.action(f"Reconciling {console.highlight(str(key))}")
    result = reconciler.reconcile(key)

    if result.skipped:
        console.warning(f"Presentation {console.highlight(str(key))} not found; nothing to do")
        return result

    console.summary_panel(
        "Reconciled",
        {
            "Presentation": str(key),
            f"ConfigMap {config_map_key(key).name}": result.config.value,
            f"Pod {pod_key(key).name}": result.pod.value,
        },
    )
    return result


def reconcile_namespace(reconciler: Reconciler, store: KubernetesStore, namespace: str | None) -> int:
    """Reconcile every Presentation in a namespace.

    A failing Presentation does not stop the others; each failure is reported.

    Args:
        reconciler: Reconciler to run the passes with.
        store: Store used to list Presentations.
        namespace: Namespace to list; None for all namespaces.

    Returns:
        The number of Presentations whose pass failed.

    """
    with console.spinner("Listing presentations..."):
        presentations = store.list_presentations(namespace)

    if not presentations:
        console.warning("No presentations found")
        return 0

    failures = 0
    changed = 0
    with console.create_task_progress() as progress:
        task = progress.add_task("Reconciling presentations", total=len(presentations))
        for presentation in presentations:
            key = presentation.metadata.key
            try:
                result = reconciler.reconcile(key)
            except PresentationOperatorError as e:
                console.error(escape(f"{key}: {e}"))
                failures += 1
            else:
                ic(result)
                changed += result.writes
            progress.advance(task)

    console.summary_panel(
        "Resync complete",
        {
            "Presentations": str(len(presentations)),
            "Changed": str(changed),
            "Failed": str(failures),
        },
    )
    if not failures:
        console.success("All presentations reconciled")
    return failures


@click.command(help="Reconcile Presentation resources into slide-rendering pods")
@click.argument("name", required=False)
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option("--select", required=False, is_flag=True, default=False, help="prompt for context select")
@click.option("--in-cluster", required=False, is_flag=True, default=False, help="use in-cluster service account")
@click.option(
    "--namespace",
    "-n",
    default="default",
    show_default=True,
    envvar="PRESENTATION_NAMESPACE",
    help="namespace of the presentation(s)",
)
@click.option("--all", "all_", required=False, is_flag=True, help="reconcile every presentation in the namespace")
@click.option("--all-namespaces", "-A", required=False, is_flag=True, help="with --all, list across all namespaces")
@click.option("--render", "-r", required=False, help="presentation manifest to render without a cluster")
@click.option("--image", default=DEFAULT_IMAGE, show_default=True, envvar="PRESENTATION_IMAGE", help="slides image")
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_REQUEST_TIMEOUT,
    show_default=True,
    envvar="PRESENTATION_REQUEST_TIMEOUT",
    help="per-request deadline in seconds",
)
def cli(
    name: str | None,
    version: bool,
    debug: bool,
    select: bool,
    in_cluster: bool,
    namespace: str,
    all_: bool,
    all_namespaces: bool,
    render: str | None,
    image: str,
    timeout: float,
) -> None:
    """Process CLI arguments and execute the appropriate action.

    Args:
        name: Name of the Presentation to reconcile.
        version: Print version and exit.
        debug: Enable debug output.
        select: Prompt for Kubernetes context selection.
        in_cluster: Use the in-cluster service account configuration.
        namespace: Namespace of the Presentation(s).
        all_: Reconcile every Presentation in the namespace.
        all_namespaces: List Presentations across all namespaces with --all.
        render: Path to a Presentation manifest to render.
        image: Image of the slides container.
        timeout: Per-request deadline in seconds.

    """
    if not debug:
        ic.disable()

    if version:
        click.echo(__version__)
        return

    try:
        settings = OperatorSettings(image=image, request_timeout=timeout)
    except ValueError as e:
        raise click.UsageError(str(e)) from None
    ic(settings)

    if all_namespaces and not all_:
        raise click.UsageError("--all-namespaces requires --all")

    try:
        if render:
            presentation = parse_presentation_file(render, default_namespace=namespace)
            console.info(f"Objects derived from {console.highlight(str(presentation.metadata.key))}")
            console.yaml_block(render_dependents(presentation, settings))
            return

        if not name and not all_:
            raise click.UsageError("Provide a presentation NAME or use --all")

        cluster = Cluster(select_context=select, in_cluster=in_cluster)
        store = cluster.store(settings)
        reconciler = Reconciler(store, settings=settings)

        if all_:
            failures = reconcile_namespace(reconciler, store, None if all_namespaces else namespace)
            if failures:
                sys.exit(1)
            return

        reconcile_presentation(reconciler, ObjectKey(name=name, namespace=namespace))
    except PresentationOperatorError as e:
        console.error(escape(str(e)))
        sys.exit(1)


if __name__ == "__main__":
    cli()
