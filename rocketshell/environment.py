"""The shell's variable table, kept as ``NAME=value`` or ``NAME`` entries."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


def entry_name(entry: str) -> str:
    """Return the name part of an entry or export argument."""
    return entry.partition("=")[0]


def is_empty_entry(entry: str) -> bool:
    """Return True if the entry has no value, with or without ``=``."""
    _, sep, value = entry.partition("=")
    return not sep or not value


def valid_identifier(arg: str) -> bool:
    """Return True if *arg* is acceptable to ``export``."""
    if not arg or arg[0] in "=+" or "0" <= arg[0] <= "9":
        return False
    name, sep, _ = arg.partition("=")
    for index, ch in enumerate(name):
        if (ch.isascii() and ch.isalnum()) or ch == "_":
            continue
        if ch == "+" and sep and index == len(name) - 1:
            continue
        return False
    return True


class Environment:
    """An ordered list of environment entries."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self.entries = list(entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def find_index(self, name: str) -> int | None:
        """Return the position of the entry called *name*, or None."""
        return next(
            (i for i, entry in enumerate(self.entries) if entry_name(entry) == name),
            None,
        )

    def get(self, name: str) -> str | None:
        """Return the value of *name*; "" if it has none, None if it is absent."""
        index = self.find_index(name)
        if index is None:
            return None
        return self.entries[index].partition("=")[2]

    def set(self, name: str, value: str) -> None:
        """Set *name* to *value*, replacing the entry or appending a new one."""
        entry = f"{name}={value}"
        index = self.find_index(name)
        if index is None:
            self.entries.append(entry)
        else:
            self.entries[index] = entry

    def export(self, args: Iterable[str]) -> list[str]:
        """Add or update entries; return the arguments that were rejected."""
        rejected = []
        for arg in args:
            if not valid_identifier(arg):
                rejected.append(arg)
                continue
            index = self.find_index(entry_name(arg))
            if index is None:
                self.entries.append(arg)
            elif "=" in arg:
                self.entries[index] = arg
        return rejected

    def unset(self, names: Iterable[str]) -> None:
        """Remove the entries with the given names; unknown names are ignored."""
        for name in names:
            index = self.find_index(name)
            if index is not None:
                del self.entries[index]

    def visible_lines(self) -> list[str]:
        """Entries that ``env`` prints: those with a non-empty value."""
        return [entry for entry in self.entries if not is_empty_entry(entry)]

    def declare_lines(self) -> list[str]:
        """Sorted ``declare -x`` lines as printed by ``export`` alone."""
        lines = []
        for entry in sorted(self.entries):
            name, sep, value = entry.partition("=")
            if sep:
                lines.append(f'declare -x {name}="{value}"')
            else:
                lines.append(f"declare -x {name}")
        return lines

    def as_dict(self) -> dict[str, str]:
        """Entries with a value, as a mapping for child processes."""
        result: dict[str, str] = {}
        for entry in self.entries:
            name, sep, value = entry.partition("=")
            if sep and name not in result:
                result[name] = value
        return result


def copy_environment(environ: Mapping[str, str] | Iterable[str]) -> Environment:
    """Build the shell's table from the process environment; OLDPWD is cleared."""
    if isinstance(environ, Mapping):
        entries = [f"{name}={value}" for name, value in environ.items()]
    else:
        entries = list(environ)
    return Environment(
        "OLDPWD" if entry.startswith("OLDPWD") else entry for entry in entries
    )