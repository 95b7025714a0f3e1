"""Ownership linker.

Every generated resource records the entity that caused its creation as its
controller owner, so deleting an Instance (or a Backup) cascades to
everything built for it. The linker works on anything satisfying
``HasMetadata``; there is no per-resource-kind branching.

Linking is rejected when:
    - the owner's kind is not registered in the ``OwnerScheme``;
    - the owner has no name or uid;
    - owner and resource live in different namespaces;
    - the resource is already controlled by a different owner.
"""

from __future__ import annotations

from dataclasses import dataclass

from dbspine.core.errors import AlreadyOwnedError, OwnershipError
from dbspine.manifests.constants import API_VERSION
from dbspine.manifests.resources import HasMetadata, OwnerReference


@dataclass(frozen=True)
class OwnerScheme:
    """The set of (apiVersion, kind) pairs allowed to own resources."""

    kinds: frozenset[tuple[str, str]]

    def recognizes(self, owner: HasMetadata) -> bool:
        return (owner.api_version, owner.kind) in self.kinds


def default_scheme() -> OwnerScheme:
    return OwnerScheme(kinds=frozenset({(API_VERSION, "Instance"), (API_VERSION, "Backup")}))


def set_controller_reference(
    owner: HasMetadata,
    obj: HasMetadata,
    scheme: OwnerScheme | None = None,
) -> None:
    """Make ``owner`` the controller of ``obj``.

    Re-linking the same owner replaces its existing reference, so the call is
    idempotent.

    Raises:
        OwnershipError: owner kind unregistered, identity incomplete, or
            namespaces differ.
        AlreadyOwnedError: ``obj`` is controlled by another owner.
    """
    scheme = scheme or default_scheme()
    owner_meta = owner.metadata
    obj_meta = obj.metadata

    if not scheme.recognizes(owner):
        raise OwnershipError(
            f"owner kind {owner.kind!r} ({owner.api_version}) is not registered in the scheme"
        ).with_context(resource_kind=obj.kind, resource_name=obj_meta.name)

    if not owner_meta.name or not owner_meta.uid:
        raise OwnershipError(
            f"{owner.kind} owner {owner_meta.name!r} has no name or uid"
        ).with_context(resource_kind=obj.kind, resource_name=obj_meta.name)

    if owner_meta.namespace and obj_meta.namespace != owner_meta.namespace:
        raise OwnershipError(
            f"cross-namespace owner references are disallowed: owner "
            f"{owner_meta.namespace}/{owner_meta.name}, object "
            f"{obj_meta.namespace}/{obj_meta.name}"
        ).with_context(resource_kind=obj.kind, resource_name=obj_meta.name)

    ref = OwnerReference(
        api_version=owner.api_version,
        kind=owner.kind,
        name=owner_meta.name,
        uid=owner_meta.uid,
        controller=True,
        block_owner_deletion=True,
    )

    existing = list(obj_meta.owner_references or [])
    for current in existing:
        if current.controller and current.uid != ref.uid:
            raise AlreadyOwnedError(
                f"object {obj_meta.namespace}/{obj_meta.name} is already owned by "
                f"another {current.kind} controller {current.name}"
            ).with_context(resource_kind=obj.kind, resource_name=obj_meta.name)

    refs = [r for r in existing if r.uid != ref.uid]
    refs.append(ref)
    obj_meta.owner_references = refs
