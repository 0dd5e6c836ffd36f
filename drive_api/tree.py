"""In-memory index over one owner's folders.

Folders reference their parent by id only. ``FolderTree`` loads every folder
of an owner with a single query and builds a child lookup next to it, so
paths, depths and subtree walks are plain dictionary traversals instead of
recursive queries.
"""

from collections import deque
from collections.abc import Iterable, Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session

from . import models


class FolderTree:
    def __init__(self, folders: Iterable[models.Folder]):
        self.nodes: dict[str, models.Folder] = {}
        self.children: dict[str | None, list[models.Folder]] = {}
        for folder in folders:
            self.add(folder)

    @classmethod
    def load(cls, db: Session, owner_id: str) -> "FolderTree":
        return cls(
            db.scalars(
                select(models.Folder).where(models.Folder.owner_id == owner_id)
            ).all()
        )

    def add(self, folder: models.Folder) -> None:
        self.nodes[folder.id] = folder
        self.children.setdefault(folder.parent_id, []).append(folder)

    def __contains__(self, folder_id: str) -> bool:
        return folder_id in self.nodes

    def ancestry(self, folder_id: str) -> list[models.Folder]:
        """Folders from the root down to ``folder_id`` (inclusive)."""
        chain = []
        seen = set()
        current = self.nodes.get(folder_id)
        while current is not None and current.id not in seen:
            seen.add(current.id)
            chain.append(current)
            current = self.nodes.get(current.parent_id) if current.parent_id else None
        chain.reverse()
        return chain

    def path_of(self, folder_id: str) -> str:
        return "/".join(folder.name for folder in self.ancestry(folder_id))

    def depth_of(self, folder_id: str) -> int:
        return len(self.ancestry(folder_id))

    def walk(self, folder_id: str) -> Iterator[models.Folder]:
        """Yield ``folder_id`` and every folder below it, parents first.

        Iterative, and each folder is yielded at most once even if the
        stored parent links were ever corrupted into a cycle.
        """
        root = self.nodes.get(folder_id)
        if root is None:
            return
        seen = {root.id}
        queue = deque([root])
        while queue:
            folder = queue.popleft()
            yield folder
            for child in self.children.get(folder.id, ()):
                if child.id not in seen:
                    seen.add(child.id)
                    queue.append(child)
