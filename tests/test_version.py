import json
import platform

from certident.server.version import Info, version_info


def _sample() -> Info:
    return Info(
        git_version="v1.2.3",
        git_commit="abc123",
        git_tree_state="clean",
        build_date="2023-01-01T00:00:00Z",
        python_version="3.11.0",
        compiler="CPython",
        platform="linux/x86_64",
    )


def test_version_info_defaults():
    info = version_info()
    assert info.git_version == "unknown"
    assert info.git_commit == "unknown"
    assert info.git_tree_state == "unknown"
    assert info.build_date == "unknown"
    assert info.python_version == platform.python_version()
    assert "/" in info.platform


def test_json_round_trip():
    info = _sample()
    data = json.loads(info.json_string())
    assert data == {
        "GitVersion": "v1.2.3",
        "GitCommit": "abc123",
        "GitTreeState": "clean",
        "BuildDate": "2023-01-01T00:00:00Z",
        "PythonVersion": "3.11.0",
        "Compiler": "CPython",
        "Platform": "linux/x86_64",
    }


def test_json_is_indented():
    lines = _sample().json_string().splitlines()
    assert lines[0] == "{"
    assert lines[-1] == "}"
    assert lines[1].startswith('  "GitVersion": ')


def test_string_columns_are_aligned():
    info = _sample()
    lines = str(info).splitlines()
    values = [
        info.git_version,
        info.git_commit,
        info.git_tree_state,
        info.build_date,
        info.python_version,
        info.compiler,
        info.platform,
    ]
    assert len(lines) == len(values)
    assert lines[0].startswith("GitVersion:")
    columns = {line.index(value) for line, value in zip(lines, values)}
    assert len(columns) == 1
    for line, value in zip(lines, values):
        assert line.endswith(value)
        label = line.split(":")[0]
        assert line[len(label) + 1 : line.index(value)].strip() == ""
    assert str(info).endswith("\n")