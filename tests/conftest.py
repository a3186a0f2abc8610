"""Shared fixtures for the latticekit test suite."""

import pytest


def _format(value):
    if isinstance(value, str):
        return f'"{value}"'
    return repr(float(value))


@pytest.fixture
def write_tfs(tmp_path):
    """Write rows to a TFS file and return its path.

    Every row must have the same keys; string values become %s columns and
    numbers %le columns.
    """
    def _write(rows, headers=None, filename="lattice.tfs"):
        columns = list(rows[0].keys())
        lines = []
        for key, value in (headers or {}).items():
            lines.append(f'@ {key} %s "{value}"')
        lines.append("* " + " ".join(columns))
        lines.append("$ " + " ".join("%s" if isinstance(rows[0][c], str) else "%le" for c in columns))
        for row in rows:
            lines.append("  " + " ".join(_format(row[c]) for c in columns))
        path = tmp_path / filename
        path.write_text("\n".join(lines) + "\n")
        return path
    return _write
