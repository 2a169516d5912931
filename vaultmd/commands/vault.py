"""CLI commands for vault entry and scope management.

Provides the ``vaultmd`` subcommands for storing, reading, listing and
deleting entries, and for removing whole scopes.
"""

import argparse
import sys

from vaultmd.app.scope_resolver import ScopeOptions, resolve_scope
from vaultmd.commands.base import CmdBase
from vaultmd.domain.exceptions import EntryNotFoundError, VaultError
from vaultmd.domain.scope import format_scope
from vaultmd.log import logger
from vaultmd.ui import ui

logger = logger.getChild(__name__)

FORMATS = ("table", "json")


def _not_found(key, version=None):
    identifier = key if version is None else f"{key} (version {version})"
    return EntryNotFoundError("Entry", identifier)


class CmdSet(CmdBase):
    """Store content as the next version of a key."""

    def run(self):
        if self.args.file:
            with open(self.args.file, encoding="utf-8") as fobj:
                content = fobj.read()
        else:
            content = sys.stdin.read()

        entry = self.vault.set(
            self.scope, self.args.key, content, self.args.description
        )
        ui.write(entry.file_path)
        return 0


class CmdGet(CmdBase):
    """Print the content path of a key."""

    def run(self):
        entry = self.vault.get(
            self.scope, self.args.key, self.args.ver, self.args.all_scopes
        )
        if entry is None:
            raise _not_found(self.args.key, self.args.ver)
        ui.write(entry.file_path)
        return 0


class CmdCat(CmdBase):
    """Print the content of a key."""

    def run(self):
        content = self.vault.cat(
            self.scope, self.args.key, self.args.ver, self.args.all_scopes
        )
        if content is None:
            raise _not_found(self.args.key, self.args.ver)
        ui.write_raw(content)
        return 0


class CmdInfo(CmdBase):
    """Show metadata of one version."""

    def run(self):
        scope = self.scope
        entry = self.vault.info(scope, self.args.key, self.args.ver)
        if entry is None:
            raise _not_found(self.args.key, self.args.ver)

        if self.args.format == "json":
            ui.write_json(dict(entry.to_dict(), scope=format_scope(scope)))
            return 0

        ui.table(
            [
                ("Key", entry.key),
                ("Scope", format_scope(scope)),
                ("Version", entry.version),
                ("Created", entry.created_at.isoformat()),
                ("Description", entry.description or ""),
                ("Archived", "yes" if entry.is_archived else "no"),
                ("Hash", entry.hash),
                ("File", entry.file_path),
            ],
            headers=("Field", "Value"),
        )
        return 0


class CmdList(CmdBase):
    """List entries of a scope, or of every scope."""

    def run(self):
        scope = None if self.args.all_scopes else self.scope
        listed = self.vault.list(
            scope,
            include_archived=self.args.include_archived,
            all_versions=self.args.all_versions,
            all_scopes=self.args.all_scopes,
        )

        if self.args.format == "json":
            ui.write_json(
                [
                    dict(item.entry.to_dict(), scope=item.scope_short)
                    for item in listed
                ]
            )
            return 0

        if not listed:
            ui.write("No entries found.")
            return 0

        ui.table(
            [
                (
                    item.scope_short,
                    item.entry.key,
                    item.entry.version,
                    item.entry.created_at.strftime("%Y-%m-%d %H:%M"),
                    "yes" if item.entry.is_archived else "",
                    item.entry.description or "",
                )
                for item in listed
            ],
            headers=(
                "Scope", "Key", "Version", "Created", "Archived", "Description"
            ),
        )
        return 0


class CmdDelete(CmdBase):
    """Delete one version, or every version, of a key."""

    def run(self):
        key = self.args.key
        if self.args.ver is not None:
            if not self.vault.delete_version(self.scope, key, self.args.ver):
                raise _not_found(key, self.args.ver)
            ui.write(f"Deleted {key} version {self.args.ver}")
            return 0

        count = self.vault.delete_key(self.scope, key)
        if not count:
            raise _not_found(key)
        ui.write(f"Deleted {key} ({count} version{'s' if count != 1 else ''})")
        return 0


class CmdArchive(CmdBase):
    """Hide a key from default listings."""

    def run(self):
        if not self.vault.archive(self.scope, self.args.key):
            ui.error_write(f"'{self.args.key}' not found or already archived.")
            return 1
        ui.write(f"Archived {self.args.key}")
        return 0


class CmdRestore(CmdBase):
    """Undo archive."""

    def run(self):
        if not self.vault.restore(self.scope, self.args.key):
            ui.error_write(f"'{self.args.key}' not found or not archived.")
            return 1
        ui.write(f"Restored {self.args.key}")
        return 0


class CmdMove(CmdBase):
    """Move a key with its history to another scope."""

    def run(self):
        source = self.scope
        target = resolve_scope(
            ScopeOptions(
                type=self.args.to_scope,
                repo=self.args.to_repo,
                branch=self.args.to_branch,
                worktree=self.args.to_worktree,
            )
        )
        self.vault.move(self.args.key, source, target)
        ui.write(
            f"Moved {self.args.key} from {format_scope(source)} "
            f"to {format_scope(target)}"
        )
        return 0


class CmdEdit(CmdBase):
    """Edit the content of a key and store it as a new version."""

    def run(self):
        from vaultmd.infrastructure.editor import edit_text

        scope = self.scope
        key = self.args.key
        current = self.vault.cat(scope, key, self.args.ver)
        if current is None:
            raise _not_found(key, self.args.ver)

        returncode, edited = edit_text(current)
        if returncode != 0:
            raise VaultError(f"editor exited with status {returncode}")
        if edited == current:
            ui.write("No changes made.")
            return 0

        entry = self.vault.set(scope, key, edited, self.args.description)
        ui.write(f"Saved {key} version {entry.version}")
        return 0


class CmdDeleteScope(CmdBase):
    """Delete a scope, a branch scope, or every scope of a repository."""

    def run(self):
        scope = self.scope
        if self.args.all_branches:
            count = self.vault.delete_all_branches(scope)
            target = f"all scopes of {getattr(scope, 'primary_path', scope)}"
        elif self.args.delete_branch:
            count = self.vault.delete_branch(scope, self.args.delete_branch)
            target = f"branch {self.args.delete_branch}"
        else:
            count = self.vault.delete_scope(scope)
            target = format_scope(scope)
        ui.write(
            f"Deleted {target} ({count} version{'s' if count != 1 else ''})"
        )
        return 0


def _add_scope_arguments(parser, prefix=""):
    flag = f"--{prefix}" if prefix else "--"
    dest = prefix.replace("-", "_")
    parser.add_argument(
        f"{flag}scope",
        dest=f"{dest}scope",
        choices=("global", "repository", "branch", "worktree"),
        help="Scope type (default: repository, or global outside git).",
    )
    parser.add_argument(
        f"{flag}repo", dest=f"{dest}repo", help="Repository path."
    )
    parser.add_argument(
        f"{flag}branch", dest=f"{dest}branch", help="Branch name."
    )
    parser.add_argument(
        f"{flag}worktree", dest=f"{dest}worktree", help="Worktree id."
    )


def add_parser(subparsers, parent_parser):
    """Register the vault subcommands."""
    scope_parser = argparse.ArgumentParser(add_help=False)
    _add_scope_arguments(scope_parser)
    parents = [parent_parser, scope_parser]

    def add(name, cmd, help_text):
        parser = subparsers.add_parser(name, parents=parents, help=help_text)
        parser.set_defaults(func=cmd)
        return parser

    # -- set --
    set_parser = add("set", CmdSet, "Store content from a file or stdin.")
    set_parser.add_argument("key", help="Entry key.")
    set_parser.add_argument(
        "-f", "--file", help="Read content from file instead of stdin."
    )
    set_parser.add_argument(
        "-d", "--description", help="Description of this version."
    )

    # -- get / cat --
    for name, cmd, help_text in (
        ("get", CmdGet, "Print the content file path of a key."),
        ("cat", CmdCat, "Print the content of a key."),
    ):
        parser = add(name, cmd, help_text)
        parser.add_argument("key", help="Entry key.")
        parser.add_argument("--ver", type=int, help="Specific version.")
        parser.add_argument(
            "--all-scopes",
            action="store_true",
            help="Fall back to broader scopes when not found.",
        )

    # -- info --
    info_parser = add("info", CmdInfo, "Show metadata of a key.")
    info_parser.add_argument("key", help="Entry key.")
    info_parser.add_argument("--ver", type=int, help="Specific version.")
    info_parser.add_argument("--format", choices=FORMATS, default="table")

    # -- list --
    list_parser = add("list", CmdList, "List entries.")
    list_parser.add_argument(
        "--all-versions", action="store_true", help="Show every version."
    )
    list_parser.add_argument(
        "--include-archived",
        action="store_true",
        help="Include archived entries.",
    )
    list_parser.add_argument(
        "--all-scopes", action="store_true", help="List every scope."
    )
    list_parser.add_argument("--format", choices=FORMATS, default="table")

    # -- delete --
    delete_parser = add("delete", CmdDelete, "Delete a key or one version.")
    delete_parser.add_argument("key", help="Entry key.")
    delete_parser.add_argument(
        "--ver", type=int, help="Delete only this version."
    )

    # -- archive / restore --
    for name, cmd, help_text in (
        ("archive", CmdArchive, "Hide a key from listings."),
        ("restore", CmdRestore, "Restore an archived key."),
    ):
        parser = add(name, cmd, help_text)
        parser.add_argument("key", help="Entry key.")

    # -- move --
    move_parser = add("move", CmdMove, "Move a key to another scope.")
    move_parser.add_argument("key", help="Entry key.")
    _add_scope_arguments(move_parser, prefix="to-")

    # -- edit --
    edit_parser = add("edit", CmdEdit, "Edit a key in $EDITOR.")
    edit_parser.add_argument("key", help="Entry key.")
    edit_parser.add_argument("--ver", type=int, help="Version to start from.")
    edit_parser.add_argument(
        "-d", "--description", help="Description of the new version."
    )

    # -- delete-scope --
    delete_scope_parser = add(
        "delete-scope", CmdDeleteScope, "Delete a scope and its entries."
    )
    group = delete_scope_parser.add_mutually_exclusive_group()
    group.add_argument(
        "--delete-branch",
        metavar="BRANCH",
        help="Delete one branch scope of the repository.",
    )
    group.add_argument(
        "--all-branches",
        action="store_true",
        help="Delete the repository scope and all of its branch scopes.",
    )
