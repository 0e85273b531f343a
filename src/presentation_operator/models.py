"""Data models for presentation-operator.

This module provides the closed set of object kinds the reconciler works
with, replacing the loosely-typed dictionaries of the dynamic client with
proper Python data classes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, NamedTuple

# Group/version of the Presentation custom resource
PRESENTATION_GROUP = "haxx.axxes.com"
PRESENTATION_VERSION = "v1"
PRESENTATION_PLURAL = "presentations"
PRESENTATION_API_VERSION = f"{PRESENTATION_GROUP}/{PRESENTATION_VERSION}"

# Key under which the markdown is stored in the ConfigMap
SLIDES_KEY = "slides.md"


class Kind(str, Enum):
    """Object kinds handled by the reconciler.

    Inherits from str so values can be used directly in log output
    and owner references.
    """

    PRESENTATION = "Presentation"
    CONFIG_MAP = "ConfigMap"
    POD = "Pod"


class ObjectKey(NamedTuple):
    """Identity of a namespaced object.

    Attributes:
        name: The object name.
        namespace: The namespace the object lives in.

    """

    name: str
    namespace: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True, slots=True)
class OwnerReference:
    """Back-reference from a dependent object to its owner.

    The API server's garbage collector deletes the dependent once the
    owner identified by ``uid`` is gone.
    """

    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool = True
    block_owner_deletion: bool = True


@dataclass(slots=True)
class ObjectMeta:
    """Metadata shared by all object kinds.

    ``uid``, ``resource_version``, ``creation_timestamp`` and
    ``deletion_timestamp`` are assigned by the store and stay empty on
    freshly derived objects.
    """

    name: str
    namespace: str
    labels: dict[str, str] = field(default_factory=dict)
    owner_references: list[OwnerReference] = field(default_factory=list)
    uid: str = ""
    resource_version: str = ""
    creation_timestamp: datetime | None = None
    deletion_timestamp: datetime | None = None

    @property
    def key(self) -> ObjectKey:
        """The object identity."""
        return ObjectKey(name=self.name, namespace=self.namespace)

    @property
    def terminating(self) -> bool:
        """True once the object is marked for deletion but not yet removed."""
        return self.deletion_timestamp is not None

    def controller_reference(self) -> OwnerReference | None:
        """Return the owner reference flagged as controller, if any."""
        for ref in self.owner_references:
            if ref.controller:
                return ref
        return None


@dataclass(slots=True)
class Presentation:
    """The user-declared desired state: markdown to be rendered as slides."""

    kind: ClassVar[Kind] = Kind.PRESENTATION

    metadata: ObjectMeta
    markdown: str = ""


@dataclass(slots=True)
class ConfigArtifact:
    """ConfigMap holding the presentation markdown under ``slides.md``."""

    kind: ClassVar[Kind] = Kind.CONFIG_MAP

    metadata: ObjectMeta
    data: dict[str, str] = field(default_factory=dict)

    @property
    def content(self) -> str:
        """The stored markdown, or an empty string when the key is missing."""
        return self.data.get(SLIDES_KEY, "")


@dataclass(slots=True)
class WorkloadUnit:
    """Single-container pod rendering the slides from a mounted ConfigMap.

    Attributes:
        metadata: Object metadata.
        container_name: Name of the only container.
        image: Container image reference.
        config_map_name: Name of the mounted ConfigMap.
        mount_path: Path the ConfigMap volume is mounted at.

    """

    kind: ClassVar[Kind] = Kind.POD

    metadata: ObjectMeta
    container_name: str
    image: str
    config_map_name: str
    mount_path: str

    @property
    def volume_name(self) -> str:
        """The volume is named after the ConfigMap it projects."""
        return self.config_map_name


StoredObject = Presentation | ConfigArtifact | WorkloadUnit


class Outcome(str, Enum):
    """What a reconciliation pass did to one dependent object."""

    CREATED = "created"
    UPDATED = "updated"
    REPLACED = "replaced"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


class ReconcileResult(NamedTuple):
    """Summary of a single reconciliation pass.

    Attributes:
        key: The Presentation that was reconciled.
        config: Outcome for the ConfigMap.
        pod: Outcome for the Pod.

    """

    key: ObjectKey
    config: Outcome
    pod: Outcome

    @property
    def skipped(self) -> bool:
        """True when the Presentation no longer exists."""
        return self.config is Outcome.SKIPPED

    @property
    def writes(self) -> bool:
        """True when the pass changed anything in the store."""
        idle = (Outcome.UNCHANGED, Outcome.SKIPPED)
        return self.config not in idle or self.pod not in idle
