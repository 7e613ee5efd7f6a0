from __future__ import annotations

from mcpadmin.domain.servers import PROJECT_PLACEHOLDER, ProvenancedRecord, ServerRecord, differs, divergences, normalize_args


def _entry(project: str, **fields: object) -> ProvenancedRecord:
    return ProvenancedRecord(record=ServerRecord(**fields), source_project=project)  # type: ignore[arg-type]


def test_normalize_args_replaces_own_project_path() -> None:
    assert normalize_args(["--root", "/A/data", "/A"], "/A") == ["--root", f"{PROJECT_PLACEHOLDER}/data", PROJECT_PLACEHOLDER]
    assert normalize_args(["/A/data"], "") == ["/A/data"]


def test_zero_or_one_record_never_differs() -> None:
    assert differs([]) is False
    assert differs([_entry("/A", command="run")]) is False


def test_project_paths_are_normalised_away() -> None:
    records = [
        _entry("/A", command="run", args=("/A/data",)),
        _entry("/B", command="run", args=("/B/data",)),
    ]
    assert differs(records) is False


def test_command_difference_is_detected() -> None:
    records = [_entry("/A", command="run-v1"), _entry("/B", command="run-v2")]
    assert differs(records) is True


def test_url_and_env_differences_are_detected() -> None:
    assert differs([_entry("/A", url="http://a"), _entry("/B", url="http://b")]) is True
    assert differs([_entry("/A", command="x", env={"K": "1"}), _entry("/B", command="x", env={"K": "2"})]) is True


def test_env_comparison_ignores_key_order() -> None:
    records = [
        _entry("/A", command="x", env={"A": "1", "B": "2"}),
        _entry("/B", command="x", env={"B": "2", "A": "1"}),
    ]
    assert differs(records) is False


def test_divergences_report_argument_positions() -> None:
    records = [
        _entry("/A", command="run", args=("--port", "80", "/A/data")),
        _entry("/B", command="run", args=("--port", "81", "/B/data", "--verbose"), env={"K": "v"}),
        _entry("/C", command="run", args=("--port", "80", "/C/data")),
    ]
    baseline, second, third = divergences(records)
    assert not baseline.any
    assert second.args and second.arg_indices == (1, 3)
    assert second.env and not second.env_missing
    assert not third.any


def test_env_missing_flagged_when_baseline_has_env() -> None:
    _, other = divergences([_entry("/A", command="x", env={"K": "v"}), _entry("/B", command="x")])
    assert other.env and other.env_missing


def test_normalize_args_leaves_non_string_values() -> None:
    assert normalize_args(["/A/x", 5, None], "/A") == [f"{PROJECT_PLACEHOLDER}/x", 5, None]
