"""
AWS credentials file handling.

The credentials file is edited line by line: only the key lines of the
target section change, every other line (other sections, comments,
spacing) is written back exactly as it was read.
"""

import configparser
import logging
import os
import shutil
import stat
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from .errors import ConfigError, SectionNotFoundError, StoreWriteError
from .exchange import TemporaryCredentials
from .paths import _get_aws_credentials_path

__all__ = [
    'CredentialsStore',
    'load_credentials_store',
    'merge_and_persist',
    'backup_path_for',
    'BACKUP_SUFFIX'
]

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"

_SECTCRE = configparser.ConfigParser.SECTCRE
_OPTCRE = configparser.ConfigParser.OPTCRE
_COMMENT_PREFIXES = ("#", ";")


_HEADER = "header"
_OPTION = "option"
_CONTINUATION = "continuation"
_OTHER = "other"


def _split_eol(line: str) -> Tuple[str, str]:
    """Split a line into its body and its line ending."""
    body = line.rstrip("\r\n")
    return body, line[len(body):]


def _indent(text: str) -> int:
    return len(text) - len(text.lstrip())


def _classify(lines: List[str]) -> List[Tuple[str, Optional[str]]]:
    """
    Label each line as configparser reads it.

    A non-blank line is a continuation only when it follows an option and is
    indented deeper than that option. Comments end a value; blank lines inside
    a value do not.

    Returns:
        One ``(kind, name)`` pair per line; ``name`` is the section header or
        the lower-cased option name
    """
    kinds = []
    indent_level = 0
    optname = None
    in_section = False
    for line in lines:
        text = _split_eol(line)[0]
        stripped = text.strip()
        if not stripped or stripped.startswith(_COMMENT_PREFIXES):
            if stripped or not optname:
                indent_level = sys.maxsize
            kinds.append((_OTHER, None))
            continue

        cur_indent = _indent(text)
        if in_section and optname and cur_indent > indent_level:
            kinds.append((_CONTINUATION, None))
            continue
        indent_level = cur_indent

        mo = _SECTCRE.match(stripped)
        if mo:
            in_section = True
            optname = None
            kinds.append((_HEADER, mo.group("header")))
            continue

        mo = _OPTCRE.match(stripped)
        if mo:
            optname = mo.group("option").strip().lower()
            kinds.append((_OPTION, optname))
        else:
            kinds.append((_OTHER, None))
    return kinds


class CredentialsStore:
    """
    An in-memory copy of a credentials file.

    Sections are kept in file order and their names are unique.
    """

    def __init__(self, path: Path, text: str):
        self.path = Path(path)
        self.original_text = text
        self._lines = text.splitlines(keepends=True)
        self._newline = "\r\n" if "\r\n" in text else "\n"
        self._validate()

    def _validate(self) -> None:
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read_string(self.original_text, source=str(self.path))
        except configparser.Error as e:
            raise ConfigError(f"Malformed AWS credentials file {self.path}: {e}") from e

    @property
    def sections(self) -> List[str]:
        """Section names in file order."""
        return [name for kind, name in _classify(self._lines) if kind == _HEADER]

    def has_section(self, name: str) -> bool:
        return name in self.sections

    def _section_bounds(self, name: str) -> Tuple[int, int, List[Tuple[str, Optional[str]]]]:
        """Header index, end index and line kinds of a section."""
        kinds = _classify(self._lines)
        start = None
        for i, (kind, header) in enumerate(kinds):
            if kind != _HEADER:
                continue
            if start is not None:
                return start, i, kinds
            if header == name:
                start = i
        if start is None:
            raise SectionNotFoundError(name, self.path)
        return start, len(self._lines), kinds

    def get(self, section: str, key: str) -> Optional[str]:
        """Read one value from a section."""
        start, end, kinds = self._section_bounds(section)
        for i in range(start + 1, end):
            if kinds[i] == (_OPTION, key):
                mo = _OPTCRE.match(self._lines[i].strip())
                return mo.group("value").strip()
        return None

    def merge(self, section: str, credentials: TemporaryCredentials) -> None:
        """
        Set the four credential keys of one section.

        Existing key lines keep their indentation, spelling and delimiter;
        keys that are not present yet are appended after the section's last
        non-blank line.

        Args:
            section: Credentials section name (the profile short name)
            credentials: Values to write

        Raises:
            SectionNotFoundError: If the section does not exist
        """
        start, end, kinds = self._section_bounds(section)
        pending = dict(credentials.as_store_values())
        order = [key for key, _ in credentials.as_store_values()]

        body = []
        replacing = False
        for i in range(start + 1, end):
            line = self._lines[i]
            kind, key = kinds[i]
            if kind == _CONTINUATION and replacing:
                # rest of a value being replaced
                continue
            if kind == _OPTION:
                replacing = False
                if key in pending:
                    text, eol = _split_eol(line)
                    indent = _indent(text)
                    mo = _OPTCRE.match(text[indent:])
                    line = text[:indent + mo.start("value")] + pending.pop(key) + eol
                    replacing = True
            body.append(line)

        if pending:
            insert_at = len(body)
            while insert_at > 0 and not body[insert_at - 1].strip():
                insert_at -= 1
            header = self._lines[start]
            if insert_at == 0 and not header.endswith(("\n", "\r")):
                self._lines[start] = header + self._newline
            elif insert_at > 0 and not body[insert_at - 1].endswith(("\n", "\r")):
                body[insert_at - 1] += self._newline
            added = [f"{key} = {pending[key]}{self._newline}" for key in order if key in pending]
            body[insert_at:insert_at] = added

        self._lines[start + 1:end] = body

    def render(self) -> str:
        """The merged file content."""
        return "".join(self._lines)


def load_credentials_store(path: Optional[Path] = None) -> CredentialsStore:
    """
    Read the credentials file into memory.

    Args:
        path: Credentials file (defaults to ~/.aws/credentials)

    Returns:
        CredentialsStore: The loaded store

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    path = Path(path) if path else _get_aws_credentials_path()
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            text = f.read()
    except FileNotFoundError as e:
        raise ConfigError(f"AWS credentials file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to read AWS credentials file {path}: {e}") from e
    return CredentialsStore(path, text)


def backup_path_for(path: Path) -> Path:
    """Sibling path the credentials file is backed up to."""
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def _backup(path: Path) -> Path:
    bak_path = backup_path_for(path)
    logger.info("Making backup %s => %s", path, bak_path)
    try:
        shutil.copy2(path, bak_path)
    except OSError as e:
        raise StoreWriteError(f"Backup of {path} to {bak_path} failed: {e}") from e
    return bak_path


def _write_atomic(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` via a temporary sibling file."""
    target = path.resolve()
    try:
        mode = stat.S_IMODE(os.stat(target).st_mode)
    except FileNotFoundError:
        mode = 0o600

    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    except OSError as e:
        raise StoreWriteError(f"Unable to write {path}: {e}") from e

    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise StoreWriteError(f"Unable to write {path}: {e}") from e


def merge_and_persist(store: CredentialsStore, short_name: str,
                      credentials: TemporaryCredentials,
                      dry_run: bool = False, backup: bool = False,
                      out: Optional[TextIO] = None) -> Optional[Path]:
    """
    Merge fresh credentials into the store and persist or preview the result.

    Args:
        store: The loaded credentials store
        short_name: Section to update
        credentials: Values to write
        dry_run: Print the merged file to ``out`` instead of writing it
        backup: Copy the on-disk file to ``<path>.bak`` before writing
        out: Stream for the dry-run preview (defaults to stdout)

    Returns:
        Optional[Path]: The backup path, if a backup was made

    Raises:
        SectionNotFoundError: If the store has no ``short_name`` section
        StoreWriteError: If the backup or the write fails
    """
    store.merge(short_name, credentials)
    logger.info("Updating credentials file")

    if dry_run:
        if backup:
            logger.info("Dry run, skipping backup")
        out = out or sys.stdout
        logger.info("Found dry-run flag, writing to stdout...")
        out.write(store.render())
        out.flush()
        return None

    bak_path = _backup(store.path) if backup else None
    _write_atomic(store.path, store.render())
    logger.debug("Wrote %s", store.path)
    return bak_path
