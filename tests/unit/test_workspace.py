"""Tests for locally generated deployment files."""

import json
from pathlib import Path

from eb_deploy.core.deployments.elastic_beanstalk import DeploymentWorkspace


def test_trust_policy_is_written_and_returned(tmp_path: Path) -> None:
    workspace = DeploymentWorkspace(tmp_path / "options.json")

    text = workspace.write_trust_policy("role", {"Version": "2012-10-17"})

    [path] = workspace.transient_files
    assert json.loads(path.read_text(encoding="utf-8")) == {"Version": "2012-10-17"}
    assert json.loads(text) == {"Version": "2012-10-17"}
    workspace.cleanup()


def test_cleanup_keeps_options_by_default(tmp_path: Path) -> None:
    options_path = tmp_path / "options.json"
    workspace = DeploymentWorkspace(options_path)
    workspace.write_trust_policy("role", {})
    trust_path = workspace.transient_files[0]
    workspace.write_options([{"Namespace": "ns", "OptionName": "name", "Value": "value"}])

    removed = workspace.cleanup()

    assert removed == [trust_path]
    assert not trust_path.exists()
    assert not trust_path.parent.exists()
    assert options_path.exists()


def test_cleanup_removes_options_with_clean_all(tmp_path: Path) -> None:
    options_path = tmp_path / "options.json"
    workspace = DeploymentWorkspace(options_path, clean_all=True)
    workspace.write_options([])

    assert workspace.cleanup() == [options_path]
    assert not options_path.exists()


def test_options_document_is_overwritten(tmp_path: Path) -> None:
    options_path = tmp_path / "options.json"
    workspace = DeploymentWorkspace(options_path)

    workspace.write_options([{"Namespace": "a", "OptionName": "b", "Value": "1"}])
    workspace.write_options([{"Namespace": "a", "OptionName": "b", "Value": "2"}])

    assert json.loads(options_path.read_text(encoding="utf-8")) == [
        {"Namespace": "a", "OptionName": "b", "Value": "2"}
    ]


def test_cleanup_without_files_is_a_no_op(tmp_path: Path) -> None:
    assert DeploymentWorkspace(tmp_path / "options.json", clean_all=True).cleanup() == []
