"""Custom exceptions for presentation-operator.

This module defines the exception hierarchy used by the reconciler and
the object store. The reconciler never recovers from these locally: every
failure aborts the pass and is surfaced to the caller, which owns retries.
"""


class PresentationOperatorError(Exception):
    """Base exception for all presentation-operator errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch every operator failure with a single
    except clause.
    """

    pass


class StoreError(PresentationOperatorError):
    """Raised when a read or write against the object store fails.

    This can occur when:
    - The API server rejects the request (malformed object, forbidden)
    - The API server is momentarily unavailable
    """

    pass


class ObjectNotFoundError(StoreError):
    """Raised when the requested object does not exist in the store.

    The reconciler treats this as an expected outcome of existence checks
    and uses it to drive the create branch.
    """

    pass


class ConflictError(StoreError):
    """Raised when a write conflicts with the stored object.

    This typically means:
    - A concurrent pass already created an object with the same name
    - The object changed since it was read (stale resourceVersion)
    - A deleted pod has not finished terminating yet
    """

    pass


class StoreTimeoutError(StoreError):
    """Raised when a store request exceeds its deadline."""

    pass


class ClusterConnectionError(StoreError):
    """Raised when connection to the Kubernetes cluster fails.

    This can occur when:
    - The kubeconfig is invalid or missing
    - The cluster is unreachable
    - Authentication fails
    """

    pass


class OwnerReferenceError(PresentationOperatorError):
    """Raised when a dependent object cannot be linked to its owner.

    This can occur when:
    - The owner has no uid because it was never read from the store
    - Owner and dependent live in different namespaces
    - The dependent is already controlled by another owner
    """

    pass


class ManifestParsingError(PresentationOperatorError):
    """Raised when parsing a Presentation manifest file fails.

    This can occur when:
    - The file does not exist
    - The file is not valid YAML
    - The YAML does not describe a Presentation resource
    """

    pass
