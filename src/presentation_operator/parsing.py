"""Presentation manifest parsing and rendering.

This module reads Presentation manifests from YAML files and renders the
dependent objects they imply, so a manifest can be previewed without a
cluster.
"""

import yaml

from presentation_operator.config import OperatorSettings
from presentation_operator.convert import presentation_from_dict, to_manifest
from presentation_operator.exceptions import ManifestParsingError
from presentation_operator.models import Presentation
from presentation_operator.ownership import set_controller_reference
from presentation_operator.resources import config_artifact_for, workload_unit_for


def parse_presentation_file(manifest_path: str, default_namespace: str = "default") -> Presentation:
    """Parse a YAML file holding a single Presentation.

    Args:
        manifest_path: Path to the manifest file.
        default_namespace: Namespace used when the manifest does not set one.

    Returns:
        The parsed Presentation.

    Raises:
        ManifestParsingError: If the file does not exist, contains malformed
            YAML, holds zero or several documents, or does not describe a
            Presentation.

    """
    try:
        with open(manifest_path) as stream:
            docs = [doc for doc in yaml.safe_load_all(stream) if doc is not None]
    except FileNotFoundError as err:
        raise ManifestParsingError(f"Manifest file '{manifest_path}' does not exist") from err
    except yaml.YAMLError as err:
        raise ManifestParsingError(f"Manifest file '{manifest_path}' contains malformed YAML: {err}") from err

    if len(docs) != 1:
        raise ManifestParsingError(
            f"File '{manifest_path}' contains {len(docs)} YAML documents. Exactly one Presentation is expected."
        )
    if not isinstance(docs[0], dict):
        raise ManifestParsingError(f"File '{manifest_path}' does not contain a valid YAML mapping.")

    try:
        return presentation_from_dict(docs[0], default_namespace=default_namespace)
    except ValueError as err:
        raise ManifestParsingError(f"File '{manifest_path}': {err}") from err


def render_dependents(presentation: Presentation, settings: OperatorSettings | None = None) -> str:
    """Render the ConfigMap and Pod a Presentation implies as YAML.

    Owner references are only included when the Presentation carries a uid,
    i.e. when it was read from a cluster.

    Args:
        presentation: The Presentation to render.
        settings: Image and mount settings for the Pod.

    Returns:
        A multi-document YAML string.

    """
    dependents = [config_artifact_for(presentation), workload_unit_for(presentation, settings)]
    if presentation.metadata.uid:
        for dependent in dependents:
            set_controller_reference(presentation, dependent)
    return yaml.safe_dump_all([to_manifest(d) for d in dependents], sort_keys=False)
