"""Path-addressed folder tree: slugs, path resolution, folders and file records.

Examples:
    >>> from cloudfolders.tree import create_folder, resolve_folder_path
    >>> reports = await create_folder(session, user.id, "Reports")
    >>> (await resolve_folder_path(session, "Reports")).id == reports.id
    True
"""

from cloudfolders.tree.files import (
    create_file,
    delete_file,
    get_file,
    resolve_file_by_logical_path,
)
from cloudfolders.tree.folders import (
    EntryKind,
    TreeEntry,
    create_folder,
    delete_folder,
    get_folder,
    list_children,
    list_roots,
)
from cloudfolders.tree.paths import compose_path, normalize_path, resolve_folder_path
from cloudfolders.tree.slugs import EntityKind, ensure_unique, make_slug

__all__ = [
    "EntityKind",
    "EntryKind",
    "TreeEntry",
    "compose_path",
    "create_file",
    "create_folder",
    "delete_file",
    "delete_folder",
    "ensure_unique",
    "get_file",
    "get_folder",
    "list_children",
    "list_roots",
    "make_slug",
    "normalize_path",
    "resolve_file_by_logical_path",
    "resolve_folder_path",
]
