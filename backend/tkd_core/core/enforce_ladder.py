"""Rank Ladder Enforcement: pure validation of predecessor/successor links.

Invariants:
    - The ladder is a single chain: exactly one first rank, every rank reachable from it
    - a.next_rank == b  <=>  b.prev_rank == a
    - Link targets are an existing rank name or NO_RANK
    - Functions here never mutate their input; they return the links that must change

Design Decisions:
    - Links checked on write (plan_insertion / plan_removal), never repaired on read
    - Ranks addressed by name because the persisted schema stores neighbor names
"""

from dataclasses import dataclass, replace

from tkd_core.core.domain_types import NO_RANK
from tkd_core.core.errors import ValidationError


@dataclass(frozen=True)
class RankLink:
    """Name-level view of a rank's position in the ladder."""
    name: str
    prev_rank: str = NO_RANK
    next_rank: str = NO_RANK


def ladder_order(links: dict[str, RankLink]) -> list[str]:
    """Rank names from the first rank to the last. Stops on a revisit."""
    heads = [link.name for link in links.values() if link.prev_rank == NO_RANK]
    if not heads:
        return []
    order: list[str] = []
    seen: set[str] = set()
    current = heads[0]
    while current != NO_RANK and current in links and current not in seen:
        order.append(current)
        seen.add(current)
        current = links[current].next_rank
    return order


def check_ladder(links: dict[str, RankLink]) -> None:
    """Raise ValidationError unless links form one acyclic, consistent chain."""
    for link in links.values():
        for ref in (link.prev_rank, link.next_rank):
            if ref != NO_RANK and ref not in links:
                raise ValidationError(
                    f"Rank '{link.name}' links to unknown rank '{ref}'",
                    "name",
                )
        if link.next_rank != NO_RANK and links[link.next_rank].prev_rank != link.name:
            raise ValidationError(
                f"Ranks '{link.name}' and '{link.next_rank}' are not mutually linked",
                "name",
            )
    if not links:
        return
    heads = [link for link in links.values() if link.prev_rank == NO_RANK]
    if len(heads) != 1:
        raise ValidationError(
            f"Ladder must have exactly one first rank, found {len(heads)}",
            "predecessor",
        )
    if len(ladder_order(links)) != len(links):
        raise ValidationError("Rank links contain a cycle", "successor")


def plan_insertion(
    links: dict[str, RankLink],
    name: str,
    predecessor: str | None = None,
    successor: str | None = None,
) -> list[RankLink]:
    """Links to write when `name` is spliced between predecessor and successor.

    Returns the new rank's link first, followed by the relinked neighbors.
    """
    if not name or not name.strip():
        raise ValidationError("Rank name cannot be empty", "name")
    if name == NO_RANK:
        raise ValidationError(f"'{NO_RANK}' is reserved for the ladder ends", "name")
    if name in links:
        raise ValidationError(f"Rank '{name}' already exists", "name")
    for label, ref in (("predecessor", predecessor), ("successor", successor)):
        if ref is not None and ref not in links:
            raise ValidationError(f"{label.capitalize()} rank '{ref}' does not exist", label)
    if predecessor is not None and predecessor == successor:
        raise ValidationError("Predecessor and successor must differ", "successor")
    if predecessor is None and successor is None and links:
        raise ValidationError(
            "A rank added to an existing ladder needs a predecessor or a successor",
            "predecessor",
        )

    if predecessor is not None and links[predecessor].next_rank != (successor or NO_RANK):
        raise ValidationError(
            f"Rank '{predecessor}' is followed by '{links[predecessor].next_rank}', "
            f"not '{successor or NO_RANK}'",
            "predecessor",
        )
    if successor is not None and links[successor].prev_rank != (predecessor or NO_RANK):
        raise ValidationError(
            f"Rank '{successor}' is preceded by '{links[successor].prev_rank}', "
            f"not '{predecessor or NO_RANK}'",
            "successor",
        )

    changed = [RankLink(name, predecessor or NO_RANK, successor or NO_RANK)]
    if predecessor is not None:
        changed.append(replace(links[predecessor], next_rank=name))
    if successor is not None:
        changed.append(replace(links[successor], prev_rank=name))

    check_ladder({**links, **{link.name: link for link in changed}})
    return changed


def plan_removal(links: dict[str, RankLink], name: str) -> list[RankLink]:
    """Neighbor links to write so the ladder closes over a removed rank."""
    removed = links[name]
    changed: list[RankLink] = []
    if removed.prev_rank != NO_RANK:
        changed.append(replace(links[removed.prev_rank], next_rank=removed.next_rank))
    if removed.next_rank != NO_RANK:
        changed.append(replace(links[removed.next_rank], prev_rank=removed.prev_rank))
    return changed
